# fireforce/sync/connectivity.py
"""
Connectivity tracking for the two remote channels.

- Data channel: request/response path to the remote zone source
- Event channel: push/telemetry path, only healthy when the remote
  source explicitly reports it

Default semantics are last-observation-wins: the most recent refresh
outcome decides. An optional staleness window additionally marks a
channel disconnected when its last success is too old.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class Channel(Enum):
    DATA = "data"
    EVENT = "event"


@dataclass(frozen=True)
class ConnectivityStatus:
    """Read-only connectivity view handed to the presentation layer.

    Attributes:
        data_channel_connected: Remote zone source reachable on last refresh
        event_channel_connected: Remote source reported its event feed healthy
        data_channel_last_success: Clock value of last data channel success
        event_channel_last_success: Clock value of last event channel success
    """

    data_channel_connected: bool
    event_channel_connected: bool
    data_channel_last_success: float | None = None
    event_channel_last_success: float | None = None


class ConnectivityTracker:
    """
    Tracks connected/disconnected state per channel.

    Only the SyncEngine records outcomes; everything else reads
    status() or is_connected().

    Example:
        >>> tracker = ConnectivityTracker()
        >>> tracker.record_success(Channel.DATA)
        >>> tracker.is_connected(Channel.DATA)
        True
        >>> tracker.record_failure(Channel.DATA)
        >>> tracker.is_connected(Channel.DATA)
        False
    """

    def __init__(
        self,
        stale_after: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialise tracker.

        Args:
            stale_after: Seconds after which a success no longer counts
                (None = last-observation-wins only)
            clock: Time source, monotonic seconds

        Raises:
            ValueError: If stale_after is not positive
        """
        if stale_after is not None and stale_after <= 0:
            raise ValueError("stale_after must be positive")

        self.stale_after = stale_after
        self._clock = clock
        self._connected: dict[Channel, bool] = {channel: False for channel in Channel}
        self._last_success: dict[Channel, float | None] = {
            channel: None for channel in Channel
        }

    def record_success(self, channel: Channel, at: float | None = None) -> None:
        if not self._connected[channel]:
            logger.info(f"{channel.value} channel connected")
        self._connected[channel] = True
        self._last_success[channel] = self._clock() if at is None else at

    def record_failure(self, channel: Channel) -> None:
        if self._connected[channel]:
            logger.warning(f"{channel.value} channel disconnected")
        self._connected[channel] = False

    def is_connected(self, channel: Channel) -> bool:
        if not self._connected[channel]:
            return False
        if self.stale_after is None:
            return True

        last = self._last_success[channel]
        return last is not None and self._clock() - last <= self.stale_after

    def last_success(self, channel: Channel) -> float | None:
        return self._last_success[channel]

    def status(self) -> ConnectivityStatus:
        return ConnectivityStatus(
            data_channel_connected=self.is_connected(Channel.DATA),
            event_channel_connected=self.is_connected(Channel.EVENT),
            data_channel_last_success=self._last_success[Channel.DATA],
            event_channel_last_success=self._last_success[Channel.EVENT],
        )
