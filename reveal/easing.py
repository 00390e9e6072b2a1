"""Easing functions for opacity transitions. ``t`` runs from 0 to 1."""


def _clamp(t: float) -> float:
    return 0.0 if t <= 0 else 1.0 if t >= 1 else t


def ease_linear(t: float) -> float:
    return _clamp(t)


def ease_cubic_in_out(t: float) -> float:
    """Symmetric cubic: slow start, fast middle, slow end."""
    t = _clamp(t) * 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


# CSS equivalent of ease_cubic_in_out, used by the client runtime
CUBIC_IN_OUT_CSS = "cubic-bezier(0.645, 0.045, 0.355, 1)"
