"""Multi-tap gesture recognition.

A :class:`TapGestureRecognizer` counts taps and fires its trigger callback
once ``required_taps`` taps arrive within ``tap_window_ms`` of the first tap
of the sequence. A tap later than that starts a new sequence, as does
reaching the threshold.
"""

import time
from enum import Enum
from typing import Callable, Optional

from .logging import LogEvent, log_debug

DEFAULT_REQUIRED_TAPS = 5
DEFAULT_TAP_WINDOW_MS = 3000

TriggerCallback = Callable[[], None]
TapFeedback = Callable[[int], None]
Clock = Callable[[], float]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GestureState(Enum):
    """Observable state of the recognizer."""

    IDLE = "idle"
    COUNTING = "counting"


class TapGestureRecognizer:
    """Sliding-window tap counter."""

    def __init__(
        self,
        on_trigger: TriggerCallback,
        required_taps: int = DEFAULT_REQUIRED_TAPS,
        tap_window_ms: int = DEFAULT_TAP_WINDOW_MS,
        enabled: bool = True,
        on_tap: Optional[TapFeedback] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize the recognizer.

        Args:
            on_trigger: Called each time the tap threshold is reached
            required_taps: Taps needed to trigger, must be positive
            tap_window_ms: Length (ms) of the window opened by the first tap
            enabled: When False all taps are ignored
            on_tap: Feedback hook called with the running count after each
                    counted tap
            clock: Millisecond clock used when a tap carries no timestamp

        Raises:
            ValueError: If ``required_taps`` or ``tap_window_ms`` is not positive
        """
        if required_taps < 1:
            raise ValueError("required_taps must be at least 1")
        if tap_window_ms <= 0:
            raise ValueError("tap_window_ms must be positive")

        self.on_trigger = on_trigger
        self.required_taps = required_taps
        self.tap_window_ms = tap_window_ms
        self.on_tap = on_tap
        self._clock = clock or _monotonic_ms
        self._enabled = enabled
        self._count = 0
        self._window_start: Optional[float] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value
        if not value:
            self.reset()

    @property
    def count(self) -> int:
        """Taps counted in the current sequence."""
        return self._count

    @property
    def window_start(self) -> Optional[float]:
        """Timestamp (ms) of the first tap of the current sequence."""
        return self._window_start

    @property
    def state(self) -> GestureState:
        return GestureState.COUNTING if self._count > 0 else GestureState.IDLE

    def reset(self) -> None:
        """Return to the idle state."""
        self._count = 0
        self._window_start = None

    def tap(self, timestamp_ms: Optional[float] = None) -> bool:
        """Register one tap.

        Args:
            timestamp_ms: Time of the tap in milliseconds; the recognizer's
                          clock is read when omitted

        Returns:
            True if this tap reached the threshold and fired the trigger
        """
        if not self._enabled:
            return False

        now = self._clock() if timestamp_ms is None else timestamp_ms

        if self._window_start is None or now - self._window_start > self.tap_window_ms:
            self._count = 1
            self._window_start = now
        else:
            self._count += 1

        if self.on_tap is not None:
            self.on_tap(self._count)

        if self._count < self.required_taps:
            return False

        log_debug(LogEvent.GESTURE, "Tap threshold reached", taps=self._count)
        self.reset()
        self.on_trigger()
        return True
