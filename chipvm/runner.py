"""Driving loops that keep instructions and timers on their own schedules."""

from typing import Optional, Protocol

import numpy as np

from chipvm.clock import Audio, Pacer, TimerClock
from chipvm.constants import CPU_FREQUENCY, STEPS_PER_FRAME, TIMER_FREQUENCY
from chipvm.emulator import Interpreter
from chipvm.logging import EmulatorLogger, build_progress_bar


class Frontend(Protocol):
    """Host bindings the real-time loop talks to."""

    audio: Audio

    def poll_quit(self) -> bool:
        ...

    def present(self, frame: np.ndarray) -> None:
        ...


def run(
    interpreter: Interpreter,
    frontend: Frontend,
    steps_per_frame: int = STEPS_PER_FRAME,
    logger: Optional[EmulatorLogger] = None,
    pacer: Optional[Pacer] = None,
) -> int:
    """Run ``interpreter`` in real time until the frontend asks to quit.

    Instructions execute in batches of ``steps_per_frame`` at
    ``CPU_FREQUENCY``; after each batch any display change is presented.
    Timers tick independently at 60Hz on a background thread. Fatal engine
    errors stop both schedules and propagate.

    Returns:
        Number of instructions executed.
    """
    logger = logger or EmulatorLogger()
    pacer = pacer or Pacer(CPU_FREQUENCY)
    clock = TimerClock(interpreter.timers, frontend.audio)
    reason = "quit"
    pacer.reset()

    try:
        with clock:
            while not frontend.poll_quit():
                for _ in range(steps_per_frame):
                    interpreter.step()
                frame = interpreter.take_frame()
                if frame is not None:
                    frontend.present(frame)
                logger.log_progress(interpreter.instruction_count, interpreter.timers)
                pacer.wait(steps_per_frame)
    except Exception as e:
        reason = type(e).__name__
        raise
    finally:
        logger.log_run_end(interpreter.instruction_count, reason)

    return interpreter.instruction_count


def run_headless(
    interpreter: Interpreter,
    steps: int,
    progress: bool = True,
) -> Interpreter:
    """Execute ``steps`` instructions as fast as possible, without a window.

    Timers are ticked in emulated time, TIMER_FREQUENCY times per
    CPU_FREQUENCY instructions, so programs that wait on the delay timer
    see the same number of ticks they would in real time.
    """
    clock = TimerClock(interpreter.timers)

    bar = build_progress_bar(steps, disable=not progress)
    try:
        for executed in range(1, steps + 1):
            interpreter.step()
            while clock.ticks < executed * TIMER_FREQUENCY // CPU_FREQUENCY:
                clock.tick()
            bar.update(1)
    finally:
        bar.close()
    return interpreter
