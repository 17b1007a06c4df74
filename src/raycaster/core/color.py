"""RGB color values and blending.

Colors are three float channels with an unbounded range: the algebra never
clamps, so lights brighter than 1.0 and albedos above 1.0 carry through the
shading sum. Clamping only happens when a color is converted to 8-bit
channels for output.

Inside kernels colors are plain vec3 values (component-wise multiply and
add are native Taichi operations) and are stored in ti.f32 fields. This
module provides the Python-side Color type used to describe scenes.

Example:
    >>> light = Color(1.0, 0.9, 0.8)
    >>> albedo_color = Color(0.2, 1.0, 0.2)
    >>> (light * albedo_color * 0.5).green
    0.45
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Color:
    """An RGB color with unbounded float channels.

    The + and * operators are for scene scripts that mix or tint colors
    before handing them to a SceneManager, e.g. ``0.5 * WHITE + tint``.
    The renderer itself never combines Color objects; kernels work on vec3.

    Attributes:
        red: Red channel.
        green: Green channel.
        blue: Blue channel.
    """

    red: float
    green: float
    blue: float

    @classmethod
    def from_rgb8(cls, red: int, green: int, blue: int) -> Color:
        """Create a color from 8-bit channels (0-255)."""
        return cls(red / 255.0, green / 255.0, blue / 255.0)

    @classmethod
    def coerce(cls, value: Color | tuple[float, float, float] | list[float]) -> Color:
        """Accept either a Color or a 3-sequence of floats.

        Raises:
            ValueError: If a sequence does not have exactly three components.
        """
        if isinstance(value, Color):
            return value
        if len(value) != 3:
            raise ValueError(f"Color must have 3 components, got {len(value)}")
        return cls(float(value[0]), float(value[1]), float(value[2]))

    def __add__(self, other: Color) -> Color:
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def __mul__(self, other: Color | float) -> Color:
        if isinstance(other, Color):
            return Color(self.red * other.red, self.green * other.green, self.blue * other.blue)
        return Color(self.red * other, self.green * other, self.blue * other)

    def __rmul__(self, other: float) -> Color:
        return self * other

    def as_tuple(self) -> tuple[float, float, float]:
        """Return the channels as a (red, green, blue) tuple."""
        return (self.red, self.green, self.blue)

    def to_rgb8(self) -> tuple[int, int, int]:
        """Convert to 8-bit channels.

        Each channel is clamped to [0, 1], scaled by 255 and rounded.
        """
        return tuple(round(min(max(c, 0.0), 1.0) * 255.0) for c in self.as_tuple())  # type: ignore[return-value]


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)

# Color written for primary rays that hit nothing (8-bit (0, 0, 100))
BACKGROUND_COLOR = Color.from_rgb8(0, 0, 100)
