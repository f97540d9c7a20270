from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict

from core.logging.logger import get_logger
from domain.enums import Channel

logger = get_logger(__name__, service="stats")


@dataclass
class _ChannelState:
    consecutive_failures: int = 0
    opened_until: float = 0.0
    probing: bool = False
    trips: int = 0


class CircuitBreaker:
    """Skips an upstream channel whose responses keep failing.

    After ``failure_threshold`` consecutive exhausted variants the channel
    is closed off for ``reset_timeout_s``. The first lookup after that window
    is a probe: success restores the channel, failure closes it again for
    twice the window.
    """

    def __init__(
        self,
        *,
        failure_threshold: int = 5,
        reset_timeout_s: float = 120,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.failure_threshold = max(1, failure_threshold)
        self.reset_timeout_s = max(1, reset_timeout_s)
        self._clock = clock
        self._channels: Dict[str, _ChannelState] = {}

    @staticmethod
    def _name(channel: Channel | str) -> str:
        return channel.value if isinstance(channel, Channel) else channel

    def allow(self, channel: Channel | str) -> bool:
        st = self._channels.get(self._name(channel))
        if st is None or st.opened_until == 0.0:
            return True
        if st.opened_until > self._clock():
            return False
        if not st.probing:
            st.probing = True
            logger.info(lambda: f"channel {self._name(channel)}: probing after cool-down")
        return True

    def is_open(self, channel: Channel | str) -> bool:
        st = self._channels.get(self._name(channel))
        return st is not None and st.opened_until > self._clock()

    def record_success(self, channel: Channel | str) -> None:
        st = self._channels.get(self._name(channel))
        if st is None:
            return
        if st.opened_until:
            logger.info(lambda: f"channel {self._name(channel)}: recovered")
        st.consecutive_failures = 0
        st.opened_until = 0.0
        st.probing = False

    def record_failure(self, channel: Channel | str) -> None:
        name = self._name(channel)
        st = self._channels.setdefault(name, _ChannelState())
        st.consecutive_failures += 1
        if not st.probing and st.consecutive_failures < self.failure_threshold:
            return
        window = self.reset_timeout_s * (2 if st.probing else 1)
        st.opened_until = self._clock() + window
        st.probing = False
        st.trips += 1
        logger.warning(lambda: f"channel {name}: open for {window:.0f}s after {st.consecutive_failures} failures")

    def status(self) -> Dict[str, dict]:
        """Snapshot per channel: open flag, failure streak and trip count."""
        now = self._clock()
        return {
            name: {
                "open": st.opened_until > now,
                "failures": st.consecutive_failures,
                "trips": st.trips,
            }
            for name, st in self._channels.items()
        }

    def reset(self) -> None:
        self._channels.clear()
