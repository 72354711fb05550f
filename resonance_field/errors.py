"""Resonance Field — Errors"""

import math
from numbers import Real


class FieldEngineError(Exception):
    pass


class InvalidDelta(FieldEngineError, ValueError):
    """Non-finite or non-numeric input; the engine state is left unchanged."""
    pass


def require_finite(name: str, value) -> float:
    """Return ``value`` as a float or raise InvalidDelta."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidDelta(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidDelta(f"{name} must be finite, got {value!r}")
    return value
