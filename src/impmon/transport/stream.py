"""Inbound frame pumping from a stream source into the controller."""

import logging
import time

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, TextIO

from impmon.errors import TransportDisruptionError

if TYPE_CHECKING:
    from impmon.session.controller import SessionController

logger = logging.getLogger(__name__)


def read_frames(source: TextIO) -> Iterator[str]:
    """
    Yield one frame per non-blank line of a text stream.

    Args:
        source: Open text stream, e.g. a recorded session or stdin
    """
    for line in source:
        frame = line.strip()
        if frame:
            yield frame


def feed_stream(
    controller: "SessionController",
    frames: Iterable[str | bytes],
    rate_hz: float | None = None,
) -> int:
    """
    Pump frames into ``controller.ingest`` until the source ends or drops.

    A dropped connection (ConnectionError, OSError or TransportDisruptionError
    raised by the frame source) ends the feed; session state and the data log
    are left as they were. Reconnecting is up to the caller.

    Args:
        controller: Session controller receiving frames
        frames: Frame source
        rate_hz: Optional pacing; frames are delivered at most this often

    Returns:
        Number of frames delivered (accepted or not)
    """
    delay = 1.0 / rate_hz if rate_hz else 0.0
    delivered = 0
    iterator = iter(frames)

    while True:
        try:
            frame = next(iterator)
        except StopIteration:
            break
        except (ConnectionError, OSError, TransportDisruptionError) as e:
            logger.warning(
                f"Stream disrupted after {delivered} frames: {e}. Session preserved."
            )
            break

        controller.ingest(frame)
        delivered += 1
        if delay:
            time.sleep(delay)

    return delivered
