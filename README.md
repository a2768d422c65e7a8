# streamd

Building blocks for a small video streaming daemon: the GStreamer pipeline
descriptions for serving camera or test-pattern video over RTSP or pushing it
as RTP over UDP, and the plumbing such a daemon needs - fixed-layout command
messages, typed message queues, bounded frame queues, locks, file helpers and
string helpers. It has no dependencies outside the standard library.

## Pipeline descriptions

`streamd.pipeline` holds the stream settings and builds launch descriptions
from them.

```python
from streamd.pipeline import (
    STREAMS, Codec, Source, StreamConfig, rtp_pipeline, rtsp_pipeline, source_bin,
)

print(source_bin(Source.TEST, "", 640, 480, 30))
# videotestsrc is-live=true pattern=smpte ! video/x-raw,format=NV12,width=640,height=480,framerate=30/1

for stream in STREAMS:          # /cam1 and /cam2 at 1920x1080, /cam3 at 640x480
    print(stream.path, rtsp_pipeline(stream.width, stream.height, stream.pt,
                                     30, Codec.H264, Source.TEST, ""))

config = StreamConfig(codec=Codec.H265, source=Source.V4L2, device="/dev/video0")
print(rtp_pipeline(config))     # ... x265enc ... rtph265pay pt=96 ... udpsink host=127.0.0.1 port=5000
```

`StreamConfig` defaults to RTSP mode (`Mode.RTSP`), the test source, H.264,
1920x1080 at 30 fps, 4000 kbps, RTP to `127.0.0.1:5000` and RTSP on
`0.0.0.0:8554`. Source bins are cut to 255 characters and full descriptions
to 511.

## Command messages

`streamd.command.Command` is a message with an `id`, four integer `params`, a
`type` and a 64-byte `text` area (also readable as the integer `size`). It
encodes to and decodes from a packed little-endian layout.

```python
from streamd.command import Command

cmd = Command(id=7, params=[1, 2, 3, 4])
cmd.set_data(9, 2)
data = cmd.to_bytes()
assert Command.from_bytes(data) == cmd
print(cmd.hexdump())
```

`get_data` with an index past the last parameter reads parameter 0, and
`set_data` with such an index does nothing.

## Message queues

`streamd.msgqueue.MessageQueue` passes commands between threads of one
process. Handles opened with the same key share a queue (key 0 always gives a
private one). Messages are sent under a positive type; a reader asks for
type 0 (any message), a positive type (that type), or a negative type (the
lowest type not above its absolute value).

```python
from streamd.command import Command
from streamd.msgqueue import MessageQueue

queue = MessageQueue(1234)
queue.send(1, Command(id=5))
if queue.peek(1):
    cmd = queue.read(1, timeout=100)   # milliseconds; None if nothing arrives
queue.close()                          # removes the queue for every handle
```

`peek_read` receives without blocking. Using a closed or removed queue raises
`QueueClosedError`.

## Frames and frame queues

`streamd.bufferframe.BufferFrame` holds a frame's bytes (at most 16 MiB are
kept) with its capture time as `(seconds, microseconds)`, resolution,
channel, `FrameType` and flag. Frames compare by capture time.

`streamd.bufferqueue.BufferQueue` is a thread-safe FIFO of frame copies with
a capacity: `add` drops the oldest frame when full, or with `wait=True`
blocks until there is room. It offers `get`, `peek`, `delete`, `pop_first`,
`pop_last`, `peek_first`, `peek_last`, `delete_first`, `delete_last`,
`clear`, `set_max_count`, `is_full`, `is_empty` and `len()`.
`control_queue()` and `network_queue(index)` (indices 0-15) return
process-wide queues.

## Locks

`streamd.sync` provides `Mutex` (with `lock`, `try_lock`, `unlock` and
`with` support), `Condition` (`wait`, `timed_wait`, `signal`, `broadcast`)
and the context managers `auto_lock` and `auto_unlock`.

## Files and settings

`streamd.files` provides `File`, a descriptor-level file handle usable with
`with`, opened with `OpenMode` flags; the helpers `file_length`,
`file_exists`, `remove_file`, `rename_path`, `copy_file`, `file_n_copy`,
`file_copy` (runs the system `cp`), `create_directory`, `directory_exists`,
`remove_directory`, `remove_tree` and `entry_count`; and `KeyValueStore`,
which loads `key = value` files where `;` starts a comment, `[%C%R]` and
`[%L%F]` in values stand for a carriage return and a newline, and the first
value of a repeated key is kept.

## Strings

`streamd.strings` has `tokenize`, `trim_left`, `trim_right`, `trim`,
`to_upper` and `to_lower` (ASCII letters only), `replace` and
`copy_limited`.

## What this package does not do

It does not run any stream. There is no RTSP server, RTP sender, worker
thread class or stream manager here, and no command to start a daemon: the
package builds the pipeline descriptions and supplies the messaging, queueing
and file plumbing, but launching GStreamer with those descriptions is left to
the application.