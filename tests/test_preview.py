"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- 8-bit conversion (clamping and rounding)
- PNG export
- Matplotlib display with a non-interactive backend

Note: show_preview is called with plt.show patched out, so no window opens.
"""

import numpy as np
import pytest
from PIL import Image as PILImage


class TestImageToUint8:
    """Test float to 8-bit conversion."""

    def test_output_type(self):
        """Test the result is uint8 with the same shape."""
        from raycaster.preview.export import image_to_uint8

        result = image_to_uint8(np.zeros((4, 5, 3), dtype=np.float32))
        assert result.dtype == np.uint8
        assert result.shape == (4, 5, 3)

    def test_clamps_out_of_range(self):
        """Test values below 0 and above 1 are clamped."""
        from raycaster.preview.export import image_to_uint8

        image = np.array([[[-0.5, 1.5, 40.0]]], dtype=np.float32)
        assert image_to_uint8(image)[0, 0].tolist() == [0, 255, 255]

    def test_rounds_to_nearest(self):
        """Test channels are rounded rather than truncated."""
        from raycaster.preview.export import image_to_uint8

        image = np.array([[[0.5, 100.0 / 255.0, 0.999]]], dtype=np.float64)
        assert image_to_uint8(image)[0, 0].tolist() == [128, 100, 255]

    def test_invalid_shape_raises(self):
        """Test arrays without three channels are rejected."""
        from raycaster.preview.export import image_to_uint8

        with pytest.raises(ValueError, match="shape"):
            image_to_uint8(np.zeros((4, 4), dtype=np.float32))
        with pytest.raises(ValueError, match="shape"):
            image_to_uint8(np.zeros((4, 4, 4), dtype=np.float32))


class TestPngExport:
    """Test PNG export."""

    def test_save_png_from_float_array(self, tmp_path):
        """Test float images are converted before saving."""
        from raycaster.preview.export import save_png_from_array

        image = np.zeros((3, 4, 3), dtype=np.float32)
        image[0, 0] = [1.0, 0.5, 2.0]
        path = tmp_path / "float.png"
        save_png_from_array(image, path)

        with PILImage.open(path) as img:
            assert img.size == (4, 3)
            assert img.mode == "RGB"
            assert img.getpixel((0, 0)) == (255, 128, 255)
            assert img.getpixel((3, 2)) == (0, 0, 0)

    def test_save_png_from_uint8_array(self, tmp_path):
        """Test uint8 images are written unchanged."""
        from raycaster.preview.export import save_png_from_array

        image = np.random.default_rng(7).integers(0, 256, size=(5, 6, 3), dtype=np.uint8)
        path = tmp_path / "bytes.png"
        save_png_from_array(image, path)

        with PILImage.open(path) as img:
            assert np.array_equal(np.asarray(img), image)

    def test_save_png_from_renderer(self, tmp_path):
        """Test saving a rendered image."""
        from raycaster.core.renderer import Renderer
        from raycaster.preview.export import save_png

        renderer = Renderer(8, 4)
        renderer.render()
        path = tmp_path / "render.png"
        save_png(renderer, str(path))

        with PILImage.open(path) as img:
            assert img.size == (8, 4)
            assert img.getpixel((7, 3)) == (0, 0, 100)

    def test_save_png_before_render_raises(self, tmp_path):
        """Test saving an unrendered renderer raises RuntimeError."""
        from raycaster.core.renderer import Renderer
        from raycaster.preview.export import save_png

        with pytest.raises(RuntimeError):
            save_png(Renderer(8, 4), tmp_path / "never.png")


class TestShowPreview:
    """Test Matplotlib display."""

    @pytest.fixture
    def captured_show(self, monkeypatch):
        """Use the Agg backend and record calls to plt.show."""
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        calls = []
        monkeypatch.setattr(plt, "show", lambda **kwargs: calls.append(kwargs))
        yield calls
        plt.close("all")

    def test_show_array(self, captured_show):
        """Test an array is displayed with the default title."""
        import matplotlib.pyplot as plt

        from raycaster.preview.display import show_preview

        show_preview(np.full((6, 10, 3), 0.5, dtype=np.float32), block=False)

        assert captured_show == [{"block": False}]
        ax = plt.gcf().axes[0]
        assert ax.get_title() == "Render Preview - 10x6"
        shown = ax.images[0].get_array()
        assert shown.shape == (6, 10, 3)
        assert int(shown[0, 0, 0]) == 128

    def test_show_renderer_custom_title(self, captured_show):
        """Test a renderer is displayed with a custom title."""
        import matplotlib.pyplot as plt

        from raycaster.core.renderer import Renderer
        from raycaster.preview.display import show_preview

        renderer = Renderer(8, 6)
        renderer.render()
        show_preview(renderer, title="Background")

        assert captured_show == [{"block": True}]
        assert plt.gcf().axes[0].get_title() == "Background"


class TestModuleExports:
    """Test that all expected symbols are exported from the module."""

    def test_preview_exports(self):
        """Test that display and export functions are exported."""
        from raycaster.preview import image_to_uint8, save_png, save_png_from_array, show_preview

        assert callable(show_preview)
        assert callable(save_png)
        assert callable(save_png_from_array)
        assert callable(image_to_uint8)
