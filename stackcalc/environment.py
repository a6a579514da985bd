"""Settings resolved from STACKCALC_* environment variables.

Every variable is optional; load_settings() falls back to the defaults below.
CLI options override whatever is resolved here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from stackcalc.registry import DEFAULT_ALPHABET, DEFAULT_SLOTS, validate_alphabet

DEFAULT_CAPACITY = 100
DEFAULT_OUTPUT_LIMIT = 2048

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


def default_state_path() -> Path:
    """~/.stackcalc/session.json, where the CLI keeps defined polynomials."""
    return Path.home() / ".stackcalc" / "session.json"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for a CalculatorService and the CLI."""

    capacity: int = DEFAULT_CAPACITY
    output_limit: int = DEFAULT_OUTPUT_LIMIT
    alphabet: str = DEFAULT_ALPHABET
    slots: int = DEFAULT_SLOTS
    strict: bool = False
    state_path: Path = field(default_factory=default_state_path)


def _int_var(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


def _bool_var(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{key} must be one of {_TRUE + _FALSE}, got {raw!r}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environ (defaults to os.environ).

    Raises ValueError naming the offending variable for malformed values.
    """
    env = os.environ if environ is None else environ

    alphabet = env.get("STACKCALC_ALPHABET", "").strip() or DEFAULT_ALPHABET
    try:
        validate_alphabet(alphabet)
    except ValueError as e:
        raise ValueError(f"STACKCALC_ALPHABET: {e}") from None

    state = env.get("STACKCALC_STATE", "").strip()
    return Settings(
        capacity=_int_var(env, "STACKCALC_CAPACITY", DEFAULT_CAPACITY),
        output_limit=_int_var(env, "STACKCALC_OUTPUT_LIMIT", DEFAULT_OUTPUT_LIMIT),
        alphabet=alphabet,
        slots=_int_var(env, "STACKCALC_SLOTS", DEFAULT_SLOTS),
        strict=_bool_var(env, "STACKCALC_STRICT", False),
        state_path=Path(state).expanduser() if state else default_state_path(),
    )
