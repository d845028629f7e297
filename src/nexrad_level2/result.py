"""
Skip marker used by the record-level decoders.

Ray and moment decoders return either a decoded value or a ``Skip``
describing why the record was dropped. Only fatal conditions raise.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Skip:
    """A record that was dropped, with a short human readable reason."""

    reason: str


def is_skip(value: Any) -> bool:
    """Return True if ``value`` is a ``Skip`` marker."""
    return isinstance(value, Skip)
