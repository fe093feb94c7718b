"""Outbound command channel to the measurement device."""

import logging

from typing import Protocol, TextIO, runtime_checkable

from impmon.errors import TransportDisruptionError
from impmon.models.session import ControlCommand

logger = logging.getLogger(__name__)


@runtime_checkable
class CommandSink(Protocol):
    """Anything that can deliver a literal command token to the device."""

    def send(self, command: str) -> None: ...


class RecordingTransport:
    """Keeps every command token sent, in order."""

    def __init__(self) -> None:
        self.sent: list[str] = []

    def send(self, command: str) -> None:
        self.sent.append(command)


class StreamWriterTransport:
    """
    Writes one command token per line to a text stream.

    Useful for piping commands to a serial bridge or for showing them on
    the console during a replay.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream

    def send(self, command: str) -> None:
        self._stream.write(f"{command}\n")
        self._stream.flush()


def send_command(transport: CommandSink | None, command: ControlCommand) -> bool:
    """
    Deliver a command, logging delivery failures instead of raising.

    Args:
        transport: Destination, or None when running without a device
        command: Command to send

    Returns:
        True if the command was handed to the transport
    """
    if transport is None:
        return False
    try:
        transport.send(command.value)
    except (ConnectionError, OSError, TransportDisruptionError) as e:
        logger.warning(f"Transport disrupted while sending {command.value}: {e}")
        return False
    logger.debug(f"Sent command {command.value}")
    return True
