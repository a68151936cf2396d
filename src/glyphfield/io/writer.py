"""Bitmap writer for saving generated distance fields.

Fields are stored bottom-up (row 0 is the lowest row), image files top-down,
so rows are flipped when saving images. Raw float fields can be saved as
NumPy arrays for lossless use.
"""

from pathlib import Path

import numpy as np
from PIL import Image

from glyphfield.domain import Bitmap
from glyphfield.exceptions import BitmapSaveError

IMAGE_SUFFIXES = {".png": "PNG", ".bmp": "BMP"}


def quantize(bitmap: Bitmap) -> np.ndarray:
    """Convert field values to 8-bit pixels.

    Each value v becomes clamp(floor(v * 256), 0, 255), rows flipped so the
    first row of the result is the top of the image.

    Returns:
        uint8 array of shape (height, width) or (height, width, 3)
    """
    pixels = np.clip(np.floor(bitmap.to_array() * 256.0), 0, 255).astype(np.uint8)
    return np.ascontiguousarray(np.flipud(pixels))


class BitmapWriter:
    """Writes generated bitmaps to image or NumPy files.

    Example:
        path = BitmapWriter.get_output_path(Path("out"), "A", "msdf", "png")
        BitmapWriter.save(bitmap, path)
    """

    @staticmethod
    def save(bitmap: Bitmap, path: Path) -> None:
        """Save a bitmap as a PNG or BMP image.

        Single-channel bitmaps become grayscale images, three-channel
        bitmaps RGB images.

        Args:
            bitmap: Bitmap to save
            path: Output file path; the suffix selects the format

        Raises:
            BitmapSaveError: If the format is unsupported or the file
                cannot be written
        """
        image_format = IMAGE_SUFFIXES.get(path.suffix.lower())
        if image_format is None:
            raise BitmapSaveError(str(path), f"unsupported image format '{path.suffix}'")

        try:
            Image.fromarray(quantize(bitmap)).save(path, format=image_format)
        except (OSError, ValueError) as e:
            raise BitmapSaveError(str(path), str(e)) from e

    @staticmethod
    def save_numpy(bitmap: Bitmap, path: Path) -> None:
        """Save the raw float32 field as a .npy file, bottom row first.

        Raises:
            BitmapSaveError: If the file cannot be written
        """
        try:
            np.save(path, bitmap.to_array())
        except OSError as e:
            raise BitmapSaveError(str(path), str(e)) from e

    @staticmethod
    def load_numpy(path: Path) -> Bitmap:
        """Load a field saved with save_numpy()."""
        data = np.load(path)
        channels = 1 if data.ndim == 2 else data.shape[2]
        return Bitmap(data.shape[1], data.shape[0], channels, data)

    @staticmethod
    def get_output_path(output_dir: Path, glyph_name: str, mode: str, suffix: str) -> Path:
        """Generate the output path for a glyph field.

        Converts: ("out", "A", "msdf", "png") -> out/A-msdf.png

        Args:
            output_dir: Directory receiving the files
            glyph_name: Glyph name
            mode: Field type name
            suffix: File extension without the dot

        Returns:
            Path inside output_dir
        """
        return output_dir / f"{glyph_name}-{mode}.{suffix}"
