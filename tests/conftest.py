"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax
import jax.numpy as jnp
from chipvm import create_state, Interpreter, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state(jax.random.PRNGKey(0))


@pytest.fixture
def wrap_state():
    """Provide a fresh state that wraps sprites around the screen edges."""
    return create_state(sprite_wrap=True)


class FakeKeypad:
    """Input layer whose pressed keys are set directly by the test."""

    def __init__(self, *pressed):
        self.pressed = set(pressed)
        self.queries = []

    def is_pressed(self, key):
        self.queries.append(key)
        return key in self.pressed


class FakeAudio:
    """Audio layer recording every tone change request."""

    def __init__(self):
        self.calls = []

    def set_tone(self, enabled):
        self.calls.append(enabled)


@pytest.fixture
def keypad():
    return FakeKeypad()


@pytest.fixture
def audio():
    return FakeAudio()


def make_interpreter(program, keypad=None, **state_kwargs):
    """Interpreter with ``program`` (a list of 16-bit words) loaded at 0x200."""
    data = b"".join(word.to_bytes(2, "big") for word in program)
    return Interpreter(load_program(create_state(**state_kwargs), data), keypad)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )
