"""Dense float bitmap holding a generated distance field."""

from typing import Any

import numpy as np
import numpy.typing as npt


class Bitmap:
    """A width x height grid of float32 pixels with 1 or 3 channels.

    Pixels are addressed as ``bitmap[x, y]``; the backing array is stored
    row-major as ``(height, width, channels)``. Values are nominally centered
    at 0.5: 0.5 lies on the outline, larger values are inside.

    Example:
        msdf = Bitmap(32, 32, channels=3)
        msdf[0, 0] = (0.2, 0.6, 0.7)
    """

    def __init__(
        self,
        width: int,
        height: int,
        channels: int = 1,
        data: npt.NDArray[np.float32] | None = None,
    ) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Invalid bitmap size {width}x{height}")
        if channels not in (1, 3):
            raise ValueError(f"Bitmap must have 1 or 3 channels, got {channels}")

        if data is None:
            data = np.zeros((height, width, channels), dtype=np.float32)
        else:
            data = np.asarray(data, dtype=np.float32)
            if data.ndim == 2:
                data = data[:, :, np.newaxis]
            if data.shape != (height, width, channels):
                raise ValueError(
                    f"Data shape {data.shape} does not match {height}x{width}x{channels}"
                )

        self.width = width
        self.height = height
        self.channels = channels
        self.data = data

    def __getitem__(self, xy: tuple[int, int]) -> Any:
        x, y = xy
        if self.channels == 1:
            return self.data[y, x, 0]
        return self.data[y, x]

    def __setitem__(self, xy: tuple[int, int], value: Any) -> None:
        x, y = xy
        if self.channels == 1:
            self.data[y, x, 0] = value
        else:
            self.data[y, x] = value

    def copy(self) -> "Bitmap":
        """Return an independent copy of the bitmap."""
        return Bitmap(self.width, self.height, self.channels, self.data.copy())

    def to_array(self) -> npt.NDArray[np.float32]:
        """Return the pixels as (height, width) or (height, width, 3) array."""
        if self.channels == 1:
            return self.data[:, :, 0]
        return self.data

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "width": self.width,
            "height": self.height,
            "channels": self.channels,
            "data": self.data.tolist(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bitmap":
        """Deserialize from dictionary."""
        return cls(
            width=data["width"],
            height=data["height"],
            channels=data["channels"],
            data=np.array(data["data"], dtype=np.float32).reshape(
                data["height"], data["width"], data["channels"]
            ),
        )

    def __repr__(self) -> str:
        return f"Bitmap({self.width}x{self.height}, channels={self.channels})"
