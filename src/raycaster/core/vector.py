"""Python-side vector helpers for scene setup.

Scene construction runs in Python scope before any kernel is launched, so
inputs such as plane normals and light directions are validated and
normalized here with NumPy, in the same way camera setup computes its basis.
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

Vec3Like = Sequence[float] | npt.NDArray[np.floating]

# Length below which a vector cannot be normalized
MIN_LENGTH = 1e-12


def as_vector(value: Vec3Like, name: str = "vector") -> npt.NDArray[np.float64]:
    """Convert a 3-component sequence to a float64 array.

    Args:
        value: Any sequence of three numbers.
        name: Name used in error messages.

    Returns:
        Array of shape (3,) with dtype float64.

    Raises:
        ValueError: If value does not have exactly three finite components.
    """
    array = np.asarray(value, dtype=np.float64)
    if array.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {array.shape}")
    if not np.all(np.isfinite(array)):
        raise ValueError(f"{name} must be finite, got {tuple(array)}")
    return array


def normalized(value: Vec3Like, name: str = "vector") -> npt.NDArray[np.float64]:
    """Return a unit-length copy of a vector.

    Args:
        value: Any sequence of three numbers.
        name: Name used in error messages.

    Returns:
        Unit vector of shape (3,).

    Raises:
        ValueError: If the vector has zero length.
    """
    array = as_vector(value, name)
    norm = float(np.linalg.norm(array))
    if norm < MIN_LENGTH:
        raise ValueError(f"{name} must have non-zero length, got {tuple(array)}")
    return array / norm

