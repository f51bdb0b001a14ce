"""CHIP-8 delay and sound timers.

The two counters are shared between the instruction stream and the 60Hz
clock driver, which run on different threads. Each counter guards its own
read/modify/write with a lock; the counters are independent of each other
and of every other piece of emulator state.

Ownership:
    * the interpreter reads the delay timer and writes either timer,
    * the clock driver is the only caller of :meth:`Timers.tick`,
    * the audio driver only observes whether the sound timer is positive.
"""

import threading


class Counter:
    """8-bit counter whose decrement saturates at zero."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: int = 0):
        self._value = value & 0xFF
        self._lock = threading.Lock()

    def get(self) -> int:
        with self._lock:
            return self._value

    def set(self, value: int) -> None:
        with self._lock:
            self._value = int(value) & 0xFF

    def decrement(self) -> int:
        """Decrement by one unless already zero; return the new value."""
        with self._lock:
            if self._value > 0:
                self._value -= 1
            return self._value

    def __repr__(self) -> str:
        return f"Counter({self.get()})"


class Timers:
    """Delay and sound timers with encapsulated access."""

    def __init__(self, delay: int = 0, sound: int = 0):
        self._delay = Counter(delay)
        self._sound = Counter(sound)

    @property
    def delay(self) -> int:
        """Current delay timer value (FX07)."""
        return self._delay.get()

    @property
    def sound(self) -> int:
        """Current sound timer value."""
        return self._sound.get()

    def set_delay(self, value: int) -> None:
        """FX15 - write the delay timer."""
        self._delay.set(value)

    def set_sound(self, value: int) -> None:
        """FX18 - write the sound timer."""
        self._sound.set(value)

    def sound_active(self) -> bool:
        return self._sound.get() > 0

    def tick(self) -> bool:
        """Decrement both timers once; return whether the tone should play."""
        self._delay.decrement()
        return self._sound.decrement() > 0

    def __repr__(self) -> str:
        return f"Timers(delay={self.delay}, sound={self.sound})"
