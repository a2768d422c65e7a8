"""Video streaming daemon building blocks: pipeline descriptions, commands, queues, locks and file helpers."""

__version__ = "0.1.0"

__all__ = [
    "bufferframe",
    "bufferqueue",
    "command",
    "files",
    "msgqueue",
    "pipeline",
    "strings",
    "sync",
]