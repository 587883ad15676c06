import math

import numpy as np

def is_finite(x):
    """False for NaN, infinities and anything that is not a number (None, 'abc')."""
    try:
        return math.isfinite(float(x))
    except (TypeError, ValueError):
        return False

def clamp(x, limit):
    """Clamp x into [-limit, +limit]; limit=None passes x through."""
    if limit is None:
        return x
    return float(np.clip(x, -limit, limit))

def ema(prev, new, alpha):
    if prev is None:
        return new
    return alpha * new + (1 - alpha) * prev
