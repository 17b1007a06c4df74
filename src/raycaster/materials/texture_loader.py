"""Texture file loading.

Decodes image files with Pillow into the (H, W, 3) uint8 arrays that
raycaster.materials.coloration.add_texture() uploads. Decoding happens once,
before rendering; kernels only ever see the texel pool.
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image, UnidentifiedImageError


def load_texture_array(image_path: str | Path) -> npt.NDArray[np.uint8]:
    """Load an image file as an RGB array.

    Images in other modes (palette, grayscale, RGBA) are converted to RGB.

    Args:
        image_path: Path to the image file.

    Returns:
        Array of shape (height, width, 3), dtype uint8, row 0 at the top.

    Raises:
        FileNotFoundError: If the image file doesn't exist.
        ValueError: If the file cannot be decoded as an image.
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Texture file not found: {path}")

    try:
        with Image.open(path) as img:
            if img.mode != "RGB":
                img = img.convert("RGB")
            return np.array(img, dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Error loading texture {path}: {e}") from e
