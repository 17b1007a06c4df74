"""Surface coloration: flat colors and wrapped image textures.

A coloration is the color source of a material. It is one of:
    FLAT:    the same color everywhere
    TEXTURE: a texel looked up from a decoded image at the hit point's
             texture coordinates

Texture coordinates produced by the primitives are unbounded (planes repeat
their texture every world unit), so they are wrapped into the image before
sampling. Wrapping is a floating modulo with sign correction: negative
remainders are folded back into range by adding the bound.

Texture storage:
    All textures share one preallocated texel pool. Each texture records its
    offset into the pool and its width/height; texel (x, y) of a texture
    lives at offset + y * width + x, with y = 0 the top image row.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> import numpy as np
    >>> from raycaster.materials.coloration import add_texture
    >>> checker = np.kron([[0, 255], [255, 0]], np.ones((4, 4))).astype(np.uint8)
    >>> texture_id = add_texture(np.stack([checker] * 3, axis=-1))
"""

from enum import IntEnum

import numpy as np
import numpy.typing as npt
import taichi as ti

from raycaster.core.ray import vec2, vec3


class ColorationKind(IntEnum):
    """Enumeration of coloration sources, used for dispatch in kernels."""

    FLAT = 0
    TEXTURE = 1


# Maximum number of textures and total texels across all textures
MAX_TEXTURES = 64
MAX_TEXELS = 1 << 21

# Texel pool (RGB in [0, 1]) and per-texture layout
texels = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TEXELS)
texture_offsets = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_widths = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_heights = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
num_textures = ti.field(dtype=ti.i32, shape=())
num_texels_used = ti.field(dtype=ti.i32, shape=())


def clear_textures() -> None:
    """Remove all textures.

    Resets the counters; texel data is overwritten by later uploads.
    """
    num_textures[None] = 0
    num_texels_used[None] = 0


def _as_rgb_float(pixels: npt.ArrayLike) -> npt.NDArray[np.float32]:
    """Normalize a decoded image to a (H, W, 3) float32 array in [0, 1].

    Integer arrays are treated as 8-bit channels and divided by 255. Float
    arrays are taken as already normalized. An alpha channel is dropped.

    Raises:
        ValueError: If the array is not (H, W, 3) or (H, W, 4), or is empty.
    """
    array = np.asarray(pixels)
    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise ValueError(f"Texture must have shape (H, W, 3) or (H, W, 4), got {array.shape}")
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise ValueError(f"Texture must not be empty, got shape {array.shape}")

    rgb = array[:, :, :3]
    if np.issubdtype(rgb.dtype, np.integer):
        return (rgb.astype(np.float32) / 255.0).astype(np.float32)
    return rgb.astype(np.float32)


@ti.kernel
def _upload_texels(data: ti.types.ndarray(), offset: ti.i32):
    """Copy (count, 3) texel rows into the pool starting at offset."""
    for i in range(data.shape[0]):
        texels[offset + i] = ti.Vector([data[i, 0], data[i, 1], data[i, 2]])


def add_texture(pixels: npt.ArrayLike) -> int:
    """Upload a decoded image to the texel pool.

    Args:
        pixels: Image array of shape (H, W, 3) or (H, W, 4), row 0 at the
            top. uint8 arrays are scaled to [0, 1]; float arrays are used as-is.

    Returns:
        The texture ID.

    Raises:
        ValueError: If the array has an unsupported shape.
        RuntimeError: If the texture table or texel pool is full.
    """
    rgb = _as_rgb_float(pixels)
    height, width = rgb.shape[0], rgb.shape[1]

    idx = num_textures[None]
    if idx >= MAX_TEXTURES:
        raise RuntimeError(f"Maximum number of textures ({MAX_TEXTURES}) exceeded")

    offset = num_texels_used[None]
    count = width * height
    if offset + count > MAX_TEXELS:
        raise RuntimeError(
            f"Texture of {width}x{height} does not fit in the texel pool "
            f"({MAX_TEXELS - offset} of {MAX_TEXELS} texels free)"
        )

    _upload_texels(np.ascontiguousarray(rgb.reshape(count, 3)), offset)

    texture_offsets[idx] = offset
    texture_widths[idx] = width
    texture_heights[idx] = height
    num_texels_used[None] = offset + count
    num_textures[None] = idx + 1
    return idx


def get_texture_count() -> int:
    """Get the number of textures uploaded."""
    return int(num_textures[None])


def get_texture_size(texture_id: int) -> tuple[int, int]:
    """Get the (width, height) of a texture.

    Raises:
        ValueError: If texture_id is invalid.
    """
    if texture_id < 0 or texture_id >= num_textures[None]:
        raise ValueError(f"Invalid texture_id: {texture_id}")
    return int(texture_widths[texture_id]), int(texture_heights[texture_id])


# =============================================================================
# Sampling (Taichi functions)
# =============================================================================


@ti.func
def wrap(value: ti.f64, bound: ti.f64) -> ti.f64:
    """Wrap a coordinate into [0, bound).

    Computes the truncated (C-style) floating remainder, then adds bound to
    negative results. A remainder that rounds up to exactly bound is
    mapped to 0 so the result is always a valid index range.

    Args:
        value: Any finite coordinate.
        bound: Positive period.

    Returns:
        The wrapped coordinate in [0, bound).
    """
    quotient = value / bound
    whole = ti.select(quotient >= 0.0, ti.floor(quotient), ti.ceil(quotient))
    wrapped = value - bound * whole
    if wrapped < 0.0:
        wrapped += bound
    if wrapped >= bound:
        wrapped = 0.0
    return wrapped


@ti.func
def sample_texture(texture_id: ti.i32, uv: vec2) -> vec3:
    """Look up the texel at wrapped texture coordinates.

    One texture repeat spans uv in [0, 1): u maps across the width, v down
    the height.

    Args:
        texture_id: The texture to sample.
        uv: Texture coordinates (unbounded).

    Returns:
        The texel color (RGB).
    """
    width = texture_widths[texture_id]
    height = texture_heights[texture_id]
    fw = ti.cast(width, ti.f64)
    fh = ti.cast(height, ti.f64)

    x = ti.min(ti.cast(wrap(uv.x * fw, fw), ti.i32), width - 1)
    y = ti.min(ti.cast(wrap(uv.y * fh, fh), ti.i32), height - 1)

    texel = texels[texture_offsets[texture_id] + y * width + x]
    return vec3(texel.x, texel.y, texel.z)


@ti.func
def resolve_coloration(kind: ti.i32, flat_color: vec3, texture_id: ti.i32, uv: vec2) -> vec3:
    """Resolve a coloration to the surface color at a hit point.

    Args:
        kind: The ColorationKind as an integer.
        flat_color: The color used by FLAT colorations.
        texture_id: The texture used by TEXTURE colorations.
        uv: Texture coordinates at the hit point.

    Returns:
        The surface color (RGB).
    """
    color = flat_color
    if kind == int(ColorationKind.TEXTURE):
        color = sample_texture(texture_id, uv)
    return color
