"""pygame bindings for the presentation, input and audio layers."""

import numpy as np
import pygame

from chipvm.config import RunConfig
from chipvm.constants import NUM_KEYS, SCREEN_WIDTH, SCREEN_HEIGHT
from chipvm.rendering import create_color_scheme, frame_to_pixels

# COSMAC VIP hex keypad laid over the left side of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_MAP = {
    0x1: pygame.K_1, 0x2: pygame.K_2, 0x3: pygame.K_3, 0xC: pygame.K_4,
    0x4: pygame.K_q, 0x5: pygame.K_w, 0x6: pygame.K_e, 0xD: pygame.K_r,
    0x7: pygame.K_a, 0x8: pygame.K_s, 0x9: pygame.K_d, 0xE: pygame.K_f,
    0xA: pygame.K_z, 0x0: pygame.K_x, 0xB: pygame.K_c, 0xF: pygame.K_v,
}


def square_wave(frequency: float, sample_rate: int, volume: float = 0.2) -> np.ndarray:
    """One period of a signed 16-bit square wave."""
    period = max(2, int(round(sample_rate / frequency)))
    t = np.arange(period)
    wave = np.where(t < period / 2, 1.0, -1.0)
    return (wave * volume * 32767).astype(np.int16)


class PygameKeyboard:
    """Input layer backed by pygame's key state."""

    def __init__(self, key_map=None):
        self.key_map = key_map or KEY_MAP
        self._pressed = [False] * NUM_KEYS

    def handle_event(self, event) -> None:
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
            return
        for key, code in self.key_map.items():
            if event.key == code:
                self._pressed[key] = event.type == pygame.KEYDOWN

    def is_pressed(self, key: int) -> bool:
        return self._pressed[key & 0xF]


class SquareWaveBeeper:
    """Audio layer: loops a square-wave tone while enabled."""

    def __init__(self, frequency: float = 250.0, sample_rate: int = 48000, volume: float = 0.2):
        self.playing = False
        self.sound = None
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
            except pygame.error:
                return
        _, _, channels = pygame.mixer.get_init()
        wave = square_wave(frequency, pygame.mixer.get_init()[0], volume)
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        self.sound = pygame.sndarray.make_sound(np.ascontiguousarray(wave))

    @property
    def available(self) -> bool:
        return self.sound is not None

    def set_tone(self, enabled: bool) -> None:
        if self.sound is None or enabled == self.playing:
            return
        if enabled:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = enabled


class PygameFrontend:
    """Window, keyboard and speaker for a running interpreter."""

    def __init__(self, config: RunConfig = None, caption: str = "CHIP-8"):
        self.config = config or RunConfig()
        pygame.init()
        self.screen = pygame.display.set_mode(
            (SCREEN_WIDTH * self.config.scale, SCREEN_HEIGHT * self.config.scale)
        )
        pygame.display.set_caption(caption)
        self.on_color, self.off_color = create_color_scheme(self.config.color_scheme)
        self.keyboard = PygameKeyboard()
        self.audio = SquareWaveBeeper(
            self.config.tone_frequency, self.config.sample_rate, self.config.volume
        )
        self.screen.fill(self.off_color)
        pygame.display.flip()

    def poll_quit(self) -> bool:
        """Pump events; True once the window is closed or ESC is pressed."""
        quit_requested = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_requested = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                quit_requested = True
            else:
                self.keyboard.handle_event(event)
        return quit_requested

    def present(self, frame: np.ndarray) -> None:
        pixels = frame_to_pixels(frame, self.config.scale, self.on_color, self.off_color)
        pygame.surfarray.blit_array(self.screen, pixels)
        pygame.display.flip()

    def close(self) -> None:
        self.audio.set_tone(False)
        pygame.quit()
