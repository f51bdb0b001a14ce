"""Console logging utilities for running CHIP-8 programs.

Provides a small levelled console logger, a specialisation that reports
interpreter throughput, and a tqdm progress bar for headless runs.
"""

import sys
import time
from typing import Any, Dict, Optional

from tqdm import tqdm


class ConsoleLogger:
    """Levelled console logger with optional colors and timestamps."""

    LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in self.LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(self.LEVELS)}")
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {k: "" for k in self.LEVELS + ("RESET",)}
        )

        self.level_order = {level: i for i, level in enumerate(self.LEVELS)}

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            print(self._format_message(level, message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger that reports run configuration and interpreter throughput."""

    def __init__(self, name: str = "chipvm", report_interval: float = 5.0, **kwargs):
        super().__init__(name, **kwargs)
        self.report_interval = report_interval
        self.last_report_time = time.time()
        self.last_report_count = 0

    def log_run_start(self, rom: str, config: Dict[str, Any]):
        self.info(f"Running {rom}")
        for key, value in config.items():
            self.debug(f"  {key}: {value}")

    def log_progress(self, instruction_count: int, timers=None):
        """Report instructions per second at most once per ``report_interval``."""
        now = time.time()
        elapsed = now - self.last_report_time
        if elapsed < self.report_interval:
            return
        executed = instruction_count - self.last_report_count
        rate = executed / elapsed if elapsed > 0 else 0.0
        timer_str = f" | delay={timers.delay} sound={timers.sound}" if timers is not None else ""
        self.debug(f"{instruction_count} instructions | {rate:.0f} Hz{timer_str}")
        self.last_report_time = now
        self.last_report_count = instruction_count

    def log_run_end(self, instruction_count: int, reason: str = "quit"):
        elapsed = time.time() - self.start_time
        self.info(f"Stopped ({reason}) after {instruction_count} instructions in {elapsed:.1f}s")


def build_progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """tqdm bar counting executed instructions."""
    if desc is None:
        desc = f"Executing ({n:,} instructions)"
    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)
    return tqdm(total=n, desc=desc, unit="instr", **kwargs)
