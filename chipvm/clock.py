"""Fixed-rate scheduling for the two CHIP-8 clock domains.

Instructions run at ``CPU_FREQUENCY`` on the caller's thread, paced by
:class:`Pacer`. Timers decay at ``TIMER_FREQUENCY`` on a background thread
owned by :class:`TimerClock`. The two only share the :class:`Timers`
counters.
"""

import threading
import time
from typing import Optional, Protocol

from chipvm.constants import TIMER_FREQUENCY
from chipvm.timers import Timers


class Audio(Protocol):
    """Audio layer: turns the tone on or off."""

    def set_tone(self, enabled: bool) -> None:
        ...


class Pacer:
    """Sleep until the next slot of a fixed-rate schedule.

    Deadlines accumulate from the start time rather than from each wake-up,
    so oversleeping on one slot is made up on the following ones. When the
    caller falls more than ``max_lag`` slots behind the schedule is reset
    instead of bursting to catch up.
    """

    def __init__(self, rate: float, max_lag: int = 10, clock=time.perf_counter, sleep=time.sleep):
        self.period = 1.0 / rate
        self.max_lag = max_lag
        self._clock = clock
        self._sleep = sleep
        self._deadline = None

    def reset(self) -> None:
        self._deadline = None

    def wait(self, slots: int = 1) -> None:
        now = self._clock()
        if self._deadline is None:
            self._deadline = now
        self._deadline += slots * self.period
        delay = self._deadline - now
        if delay > 0:
            self._sleep(delay)
        elif -delay > self.max_lag * self.period:
            self._deadline = now


class TimerClock:
    """Background 60Hz driver for the delay/sound timers.

    Each tick decrements both timers (saturating at zero) and tells the
    audio layer whether the sound timer is still running.
    """

    def __init__(self, timers: Timers, audio: Optional[Audio] = None, frequency: float = TIMER_FREQUENCY):
        self.timers = timers
        self.audio = audio
        self.frequency = frequency
        self.ticks = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> bool:
        active = self.timers.tick()
        if self.audio is not None:
            self.audio.set_tone(active)
        self.ticks += 1
        return active

    def _run(self) -> None:
        period = 1.0 / self.frequency
        deadline = time.perf_counter()
        while True:
            deadline += period
            delay = deadline - time.perf_counter()
            if delay < -period:
                deadline = time.perf_counter()
                delay = 0
            if self._stop.wait(max(delay, 0)):
                break
            self.tick()

    def start(self) -> "TimerClock":
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="chip8-timers", daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        """Stop ticking and silence the audio layer."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
        if self.audio is not None:
            self.audio.set_tone(False)

    def __enter__(self) -> "TimerClock":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
