"""Thin adapters between the session controller and the measurement stream."""

from impmon.transport.base import (
    CommandSink,
    RecordingTransport,
    StreamWriterTransport,
    send_command,
)
from impmon.transport.stream import feed_stream, read_frames

__all__ = [
    "CommandSink",
    "RecordingTransport",
    "StreamWriterTransport",
    "feed_stream",
    "read_frames",
    "send_command",
]
