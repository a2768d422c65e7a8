"""Stream settings and the media pipeline descriptions built from them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_RTSP_HOST = "0.0.0.0"
DEFAULT_RTSP_PORT = 8554
DEFAULT_RTP_HOST = "127.0.0.1"
DEFAULT_RTP_PORT = 5000
DEFAULT_DEVICE = "/dev/video0"
DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
DEFAULT_FPS = 30
DEFAULT_BITRATE = 4000

# Descriptions are limited to the size of the buffers they are formatted into.
SOURCE_BIN_LIMIT = 255
PIPELINE_LIMIT = 511


class Codec(Enum):
    H264 = "h264"
    H265 = "h265"

    @property
    def encoder(self) -> str:
        return "x265enc" if self is Codec.H265 else "x264enc"

    @property
    def parser(self) -> str:
        return "h265parse" if self is Codec.H265 else "h264parse"

    @property
    def payloader(self) -> str:
        return "rtph265pay" if self is Codec.H265 else "rtph264pay"

    @property
    def encoding_name(self) -> str:
        """The RTP encoding name used in session descriptions."""
        return self.value.upper()


class Source(Enum):
    TEST = "testsrc"
    V4L2 = "v4l2"


class Mode(Enum):
    RTSP = "rtsp"
    RTP = "rtp"


@dataclass
class StreamConfig:
    """Everything needed to set up either an RTSP server or an RTP sender."""

    mode: Mode = Mode.RTSP
    source: Source = Source.TEST
    host: str = DEFAULT_RTP_HOST
    port: int = DEFAULT_RTP_PORT
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fps: int = DEFAULT_FPS
    bitrate: int = DEFAULT_BITRATE
    codec: Codec = Codec.H264
    device: str = DEFAULT_DEVICE
    rtsp_host: str = DEFAULT_RTSP_HOST
    rtsp_port: int = DEFAULT_RTSP_PORT


@dataclass(frozen=True)
class RtspStream:
    """A mount path with its resolution and RTP payload type."""

    path: str
    width: int
    height: int
    pt: int


STREAMS: tuple[RtspStream, ...] = (
    RtspStream("/cam1", 1920, 1080, 96),
    RtspStream("/cam2", 1920, 1080, 97),
    RtspStream("/cam3", 640, 480, 98),
)


def source_bin(source: Source, device: str, width: int, height: int, fps: int) -> str:
    """The capture part of a pipeline: a V4L2 device or a live test pattern."""
    caps = f"video/x-raw,format=NV12,width={width},height={height},framerate={fps}/1"
    if source is Source.V4L2:
        text = f"v4l2src device={device} ! {caps}"
    else:
        text = f"videotestsrc is-live=true pattern=smpte ! {caps}"
    return text[:SOURCE_BIN_LIMIT]


def rtsp_pipeline(
    width: int,
    height: int,
    pt: int,
    fps: int,
    codec: Codec,
    source: Source,
    device: str,
) -> str:
    """The launch description of one RTSP mount."""
    src = source_bin(source, device, width, height, fps)
    text = (
        f"( {src} ! videoconvert ! {codec.encoder} tune=zerolatency ! "
        f"{codec.parser} ! {codec.payloader} pt={pt} name=pay0 config-interval=1 )"
    )
    return text[:PIPELINE_LIMIT]


def rtp_pipeline(config: StreamConfig) -> str:
    """The launch description of a pipeline sending RTP over UDP."""
    src = source_bin(config.source, config.device, config.width, config.height, config.fps)
    codec = config.codec
    text = (
        f"{src} ! videoconvert ! "
        f"{codec.encoder} tune=zerolatency bitrate={config.bitrate} ! "
        f"{codec.payloader} pt=96 config-interval=1 ! "
        f"udpsink host={config.host} port={config.port} sync=false"
    )
    return text[:PIPELINE_LIMIT]