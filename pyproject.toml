[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "streamd"
version = "0.1.0"
description = "Building blocks for a video streaming daemon: GStreamer pipeline descriptions for RTSP and RTP, command messages, message and frame queues, locks, file and string helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["video", "streaming", "rtsp", "rtp", "gstreamer", "h264", "h265", "v4l2", "queue"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["streamd"]

[tool.hatch.build.targets.sdist]
include = ["streamd", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
