# geometry.py

import math
import constants as C

def remap(value, in_min, in_max, out_min, out_max):
    """Linearly maps value from [in_min, in_max] onto [out_min, out_max] (unclamped)."""
    if in_max == in_min:
        return out_min
    return out_min + (value - in_min) * (out_max - out_min) / (in_max - in_min)

def clamp(value, low, high):
    return max(low, min(high, value))

def point_key(x, y, decimals=C.POINT_KEY_DECIMALS):
    """Quantizes plant-local coordinates to an integer key used for point deduplication."""
    factor = 10 ** decimals
    return (int(round(x * factor)), int(round(y * factor)))

def law_of_cosines(side_a, side_b, angle):
    """Length of the side opposite `angle` in a triangle with the two given sides."""
    # Rounding can push the radicand a hair below zero for nearly collinear sides.
    return math.sqrt(max(0.0, side_a * side_a + side_b * side_b - 2 * side_a * side_b * math.cos(angle)))
