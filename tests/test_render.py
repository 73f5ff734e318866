"""Tests for image rendering."""

import numpy as np
import pytest
from PIL import Image

from wavspec.analysis import TransformMap
from wavspec.core import InvalidParameter, InvalidState
import wavspec.output.image as image_module
from wavspec.output import ImageRenderer, RenderConfig, hwb_to_rgb


@pytest.fixture
def normalized_map():
    tmap = TransformMap(3, 4)
    tmap.write_row(1, np.array([0.0, 2.0, 1.0, 0.0]))
    tmap.normalize()
    return tmap


class TestImageRenderer:
    """Tests for ImageRenderer."""

    def test_gray_image_layout(self, normalized_map):
        image = ImageRenderer(RenderConfig(colormap="gray")).render(normalized_map)

        assert image.mode == "L"
        # x = window, y = bin
        assert image.size == (3, 4)
        assert image.getpixel((1, 1)) == 255
        assert image.getpixel((1, 2)) == 127
        assert image.getpixel((0, 1)) == 0

    def test_flip_puts_low_bins_at_bottom(self, normalized_map):
        image = ImageRenderer(RenderConfig(colormap="gray", flip=True)).render(normalized_map)
        assert image.getpixel((1, 4 - 1 - 1)) == 255

    def test_hwb_is_default(self, normalized_map):
        assert RenderConfig().colormap == "hwb"

        image = ImageRenderer().render(normalized_map)

        assert image.mode == "RGB"
        assert image.size == (3, 4)
        # Silent cells are pure hue 0, the loudest cell collapses to gray
        assert image.getpixel((0, 1)) == (255, 0, 0)
        r, g, b = image.getpixel((1, 1))
        assert r == g == b

    def test_hwb_hue_wraps_at_256(self, normalized_map, monkeypatch):
        seen = {}
        original = image_module.hwb_to_rgb

        def recording_hwb(hue, white, black):
            seen.update(hue=hue, white=white, black=black)
            return original(hue, white, black)

        monkeypatch.setattr(image_module, "hwb_to_rgb", recording_hwb)
        ImageRenderer().render(normalized_map)

        # Display value 255 -> hue 127/256, whiteness 127/255, blackness 1
        assert seen["hue"][1, 1] == pytest.approx(127 / 256)
        assert seen["white"][1, 1] == pytest.approx(127 / 255)
        assert seen["black"][1, 1] == pytest.approx(1.0)

    def test_save_png(self, normalized_map, tmp_path):
        out = tmp_path / "nested" / "graph.png"
        written = ImageRenderer().save(normalized_map, out)

        assert written == out
        with Image.open(out) as image:
            assert image.size == (3, 4)

    def test_unnormalized_map(self):
        tmap = TransformMap(2, 2)
        with pytest.raises(InvalidState):
            ImageRenderer().render(tmap)

    def test_unknown_colormap(self):
        with pytest.raises(InvalidParameter, match="colormap"):
            RenderConfig(colormap="viridis")


class TestHwbToRgb:
    """Tests for the HWB color conversion."""

    def test_pure_hues(self):
        rgb = hwb_to_rgb(np.array([0.0, 1 / 3, 2 / 3]), np.zeros(3), np.zeros(3))
        np.testing.assert_allclose(rgb, [[1, 0, 0], [0, 1, 0], [0, 0, 1]], atol=1e-12)

    def test_white_and_black(self):
        rgb = hwb_to_rgb(np.array([0.3, 0.3]), np.array([1.0, 0.0]), np.array([0.0, 1.0]))
        np.testing.assert_allclose(rgb, [[1, 1, 1], [0, 0, 0]], atol=1e-12)

    def test_excess_whiteness_blackness_is_gray(self):
        rgb = hwb_to_rgb(np.array([0.5]), np.array([1.0]), np.array([1.0]))
        np.testing.assert_allclose(rgb, [[0.5, 0.5, 0.5]])
