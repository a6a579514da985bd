"""Registry persistence between CLI invocations.

A session file is JSON:
    {"version": 1, "alphabet": "abcde", "polynomials": {"a": "2,2,1,3,0", ...}}

Polynomials are stored in standard format, which parses back to the same value.
A file that is unreadable or has the wrong shape loads as no session; single
entries that cannot be restored are skipped with a warning.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from stackcalc.errors import CalcError
from stackcalc.polynomial import Polynomial
from stackcalc.registry import PolynomialRegistry

logger = logging.getLogger(__name__)

SESSION_VERSION = 1


@dataclass
class Session:
    """Serializable snapshot of a PolynomialRegistry."""

    alphabet: str
    polynomials: dict[str, str] = field(default_factory=dict)
    version: int = SESSION_VERSION

    @classmethod
    def capture(cls, registry: PolynomialRegistry) -> Session:
        return cls(
            alphabet=registry.alphabet,
            polynomials={
                name: poly.format_standard()
                for name, poly in sorted(registry.snapshot().items())
            },
        )

    def restore(self, registry: PolynomialRegistry) -> list[str]:
        """Replace registry contents with this session.

        Names outside the registry's alphabet, malformed polynomials and
        entries beyond the registry's slots are skipped. Returns the names
        that were restored.
        """
        registry.clear_all()
        restored = []
        for name, standard in sorted(self.polynomials.items()):
            if len(name) != 1 or name not in registry.alphabet:
                logger.warning("skipping '%s': not in alphabet '%s'", name, registry.alphabet)
                continue
            try:
                registry.assign(name, Polynomial.parse(standard, strict=True, counted=True))
            except CalcError as e:
                logger.warning("skipping '%s': %s", name, e.message)
                continue
            restored.append(name)
        return restored

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "alphabet": self.alphabet,
            "polynomials": dict(self.polynomials),
        }

    @classmethod
    def from_dict(cls, d: dict) -> Session:
        """Build a Session, raising ValueError if d does not have the session shape."""
        alphabet = d.get("alphabet", "")
        polynomials = d.get("polynomials", {})
        version = d.get("version", SESSION_VERSION)
        if not isinstance(alphabet, str):
            raise ValueError("'alphabet' must be a string")
        if not isinstance(polynomials, dict):
            raise ValueError("'polynomials' must be an object")
        if not all(isinstance(v, str) for v in polynomials.values()):
            raise ValueError("'polynomials' values must be strings")
        if not isinstance(version, int) or isinstance(version, bool):
            raise ValueError("'version' must be an integer")
        return cls(alphabet=alphabet, polynomials=dict(polynomials), version=version)

    def save(self, path: Path) -> None:
        """Write the session JSON, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> Optional[Session]:
        """Load a session file. Returns None if it is missing, unreadable or malformed."""
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("ignoring unreadable session %s: %s", path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("ignoring session %s: not a JSON object", path)
            return None
        try:
            return cls.from_dict(data)
        except ValueError as e:
            logger.warning("ignoring malformed session %s: %s", path, e)
            return None
