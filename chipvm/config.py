"""Run configuration for the CHIP-8 driver and frontend."""

from chex import dataclass

from chipvm.constants import STEPS_PER_FRAME


@dataclass(frozen=True)
class RunConfig:
    """Settings that do not change architectural behavior.

    The instruction rate and the 60Hz timer rate are fixed constants and are
    deliberately absent here.
    """
    scale: int = 16
    color_scheme: str = "classic"
    sprite_wrap: bool = False
    tone_frequency: float = 250.0
    sample_rate: int = 48000
    volume: float = 0.2
    steps_per_frame: int = STEPS_PER_FRAME
    log_level: str = "INFO"

    def __post_init__(self):
        if self.scale < 1:
            raise ValueError(f"scale must be positive, got {self.scale}")
        if self.steps_per_frame < 1:
            raise ValueError(f"steps_per_frame must be positive, got {self.steps_per_frame}")
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be within [0, 1], got {self.volume}")
