"""Preview rendering of generated distance fields.

A distance field is resampled to the output size with bilinear filtering and
turned back into coverage: values are mapped through the pixel range around
the 0.5 isoline, so a larger range gives a sharper edge. MSDF input is
combined through the median of its channels.
"""

import numpy as np

from glyphfield.domain import Bitmap
from glyphfield.geometry import Vector2, median


def _clamp_index(n: int, upper: int) -> int:
    if n < 0:
        return 0
    if n > upper:
        return upper
    return n


def sample(bitmap: Bitmap, pos: Vector2) -> np.ndarray:
    """Bilinearly sample a bitmap at normalized coordinates.

    Args:
        bitmap: Bitmap to sample
        pos: Position with (0, 0) at the bottom-left corner of the first
            pixel and (1, 1) at the top-right corner of the last one

    Returns:
        Array of channel values
    """
    w, h = bitmap.width, bitmap.height
    x = pos.x * w - 0.5
    y = pos.y * h - 0.5
    left = int(np.floor(x))
    bottom = int(np.floor(y))
    lr = x - left
    bt = y - bottom
    right = _clamp_index(left + 1, w - 1)
    top = _clamp_index(bottom + 1, h - 1)
    left = _clamp_index(left, w - 1)
    bottom = _clamp_index(bottom, h - 1)

    data = bitmap.data
    lower = (1 - lr) * data[bottom, left] + lr * data[bottom, right]
    upper = (1 - lr) * data[top, left] + lr * data[top, right]
    return (1 - bt) * lower + bt * upper


def distance_value(distance: float, px_range: float) -> float:
    """Map a field value to coverage in [0, 1].

    A pixel range of 0 gives a hard step at 0.5.
    """
    if px_range == 0:
        return 1.0 if distance > 0.5 else 0.0
    return min(max((distance - 0.5) * px_range + 0.5, 0.0), 1.0)


def render_sdf(output: Bitmap, sdf: Bitmap, px_range: float) -> None:
    """Render a distance field into a coverage bitmap.

    Supports single-channel to single-channel, three-channel to single-channel
    (median) and three-channel to three-channel rendering.

    Args:
        output: Bitmap receiving coverage values
        sdf: Generated distance field
        px_range: Distance range the field was generated with, in field pixels

    Raises:
        ValueError: If a single-channel field is rendered to three channels
    """
    if sdf.channels == 1 and output.channels == 3:
        raise ValueError("Cannot render a single-channel field to three channels")

    w, h = output.width, output.height
    if w == 0 or h == 0:
        return
    px_range *= (w + h) / (sdf.width + sdf.height)

    for y in range(h):
        for x in range(w):
            s = sample(sdf, Vector2((x + 0.5) / w, (y + 0.5) / h))
            if sdf.channels == 1:
                output[x, y] = distance_value(float(s[0]), px_range)
            elif output.channels == 1:
                output[x, y] = distance_value(median(float(s[0]), float(s[1]), float(s[2])), px_range)
            else:
                output[x, y] = [distance_value(float(v), px_range) for v in s]


def simulate_8bit(bitmap: Bitmap) -> None:
    """Quantize bitmap values in place as if stored with 8 bits per channel."""
    bitmap.data[...] = np.floor(np.clip(bitmap.data * 256.0, 0.0, 255.0)) / 255.0
