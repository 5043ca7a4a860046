"""Unit tests for aspect-fill crop computation."""

import math

import pytest
from PIL import Image

from capture_geometry.coordinates import ImageRect, NormalizedRect, Size, ViewRect
from capture_geometry.crop import AspectFillMapping, compute_crop_rect, crop_image

RED = (255, 0, 0)
BLUE = (0, 0, 255)


@pytest.mark.unit
class TestAspectFillMapping:
    """Tests for the visible band of an aspect-filled image."""

    def test_wide_image_in_tall_viewport(self):
        mapping = AspectFillMapping.between(Size(4000, 3000), Size(1000, 2000))

        assert mapping.visible_region.as_tuple() == pytest.approx((1250, 0, 1500, 3000))

    def test_tall_image_in_square_viewport(self):
        mapping = AspectFillMapping.between(Size(3000, 4000), Size(1000, 1000))

        assert mapping.visible_region.as_tuple() == pytest.approx((0, 500, 3000, 3000))

    def test_matching_aspect_shows_whole_image(self):
        mapping = AspectFillMapping.between(Size(4000, 3000), Size(400, 300))

        assert mapping.visible_region.as_tuple() == pytest.approx((0, 0, 4000, 3000))

    @pytest.mark.parametrize(
        "image,view",
        [
            (Size(0, 3000), Size(1000, 2000)),
            (Size(4000, 3000), Size(1000, 0)),
            (Size(4000, 3000), Size(-1, 2000)),
        ],
    )
    def test_invalid_sizes(self, image, view):
        assert AspectFillMapping.between(image, view) is None

    def test_to_image(self):
        mapping = AspectFillMapping.between(Size(4000, 3000), Size(1000, 2000))

        rect = mapping.to_image(NormalizedRect(0.4, 0.4, 0.2, 0.2))

        assert rect.as_tuple() == pytest.approx((1850, 1200, 300, 600))


@pytest.mark.unit
class TestComputeCropRect:
    """Tests for compute_crop_rect."""

    def test_letterboxed_left_right_example(self):
        """4000x3000 photo in a 1000x2000 preview."""
        crop = compute_crop_rect(
            ViewRect(x=400, y=800, width=200, height=400),
            Size(width=1000, height=2000),
            Size(width=4000, height=3000),
        )

        assert isinstance(crop, ImageRect)
        assert crop.as_tuple() == pytest.approx((1850, 1200, 300, 600))

    def test_letterboxed_top_bottom(self):
        """3000x4000 portrait photo in a square preview: 500px cut from top and bottom."""
        crop = compute_crop_rect(
            ViewRect(x=250, y=250, width=500, height=500),
            Size(width=1000, height=1000),
            Size(width=3000, height=4000),
        )

        assert crop.as_tuple() == pytest.approx((750, 1250, 1500, 1500))

    def test_full_viewport_guide_with_matching_aspect_is_full_image(self):
        crop = compute_crop_rect(
            ViewRect(x=0, y=0, width=400, height=300),
            Size(width=400, height=300),
            Size(width=4000, height=3000),
        )

        assert crop.as_tuple() == pytest.approx((0, 0, 4000, 3000))

    def test_full_viewport_guide_is_visible_band(self):
        crop = compute_crop_rect(
            ViewRect(x=0, y=0, width=1000, height=2000),
            Size(width=1000, height=2000),
            Size(width=4000, height=3000),
        )

        assert crop.as_tuple() == pytest.approx((1250, 0, 1500, 3000))

    def test_result_stays_within_image(self):
        crop = compute_crop_rect(
            ViewRect(x=-10, y=-10, width=1020, height=2020),
            Size(width=1000, height=2000),
            Size(width=1000, height=2000),
        )

        assert crop.as_tuple() == pytest.approx((0, 0, 1000, 2000))

    def test_scale_invariance(self):
        image = Size(width=4032, height=3024)
        guide = ViewRect(x=37.5, y=211.0, width=300.0, height=180.0)
        preview = Size(width=390, height=844)

        crop = compute_crop_rect(guide, preview, image)
        doubled = compute_crop_rect(guide.scaled(2, 2), Size(width=780, height=1688), image)

        assert doubled.as_tuple() == pytest.approx(crop.as_tuple())

    def test_zero_preview_is_unavailable(self):
        crop = compute_crop_rect(
            ViewRect(x=0, y=0, width=100, height=100),
            Size(width=0, height=0),
            Size(width=4000, height=3000),
        )

        assert crop is None

    def test_zero_image_is_unavailable(self):
        crop = compute_crop_rect(
            ViewRect(x=0, y=0, width=100, height=100),
            Size(width=1000, height=2000),
            Size(width=0, height=3000),
        )

        assert crop is None

    def test_guide_outside_image_is_unavailable(self):
        crop = compute_crop_rect(
            ViewRect(x=2000, y=0, width=100, height=100),
            Size(width=1000, height=2000),
            Size(width=4000, height=3000),
        )

        assert crop is None

    def test_zero_size_guide_is_unavailable(self):
        crop = compute_crop_rect(
            ViewRect(x=500, y=500, width=0, height=100),
            Size(width=1000, height=2000),
            Size(width=4000, height=3000),
        )

        assert crop is None


@pytest.mark.unit
class TestCropImage:
    """Tests for cropping Pillow images."""

    @pytest.fixture
    def photo(self):
        """400x300 photo, left half red and right half blue."""
        img = Image.new("RGB", (400, 300), BLUE)
        img.paste(Image.new("RGB", (200, 300), RED), (0, 0))
        return img

    def test_crop_to_visible_band(self, photo):
        # 200x300 preview shows x 100..300 of the photo
        cropped = crop_image(photo, ViewRect(x=0, y=0, width=200, height=300), Size(width=200, height=300))

        assert cropped.size == (200, 300)
        assert cropped.getpixel((0, 0)) == RED
        assert cropped.getpixel((199, 299)) == BLUE

    def test_crop_left_half_of_view(self, photo):
        cropped = crop_image(photo, ViewRect(x=0, y=0, width=100, height=300), Size(width=200, height=300))

        assert cropped.size == (100, 300)
        assert set(cropped.getdata()) == {RED}

    def test_unavailable_crop_returns_original(self, photo):
        cropped = crop_image(photo, ViewRect(x=0, y=0, width=100, height=100), Size(width=0, height=0))

        assert cropped is photo

    def test_subpixel_crop_returns_original(self, photo):
        cropped = crop_image(photo, ViewRect(x=10, y=10, width=0.1, height=0.1), Size(width=400, height=300))

        assert cropped is photo

    @pytest.mark.parametrize(
        "guide",
        [
            ViewRect(x=math.nan, y=0, width=10, height=10),
            ViewRect(x=0, y=0, width=math.inf, height=10),
            ViewRect(x=0, y=-math.inf, width=10, height=10),
        ],
    )
    def test_non_finite_guide_returns_original(self, photo, guide):
        assert compute_crop_rect(guide, Size(width=100, height=100), Size(width=400, height=300)) is None
        assert crop_image(photo, guide, Size(width=100, height=100)) is photo

    @pytest.mark.parametrize("preview", [Size(width=math.nan, height=100), Size(width=100, height=math.inf)])
    def test_non_finite_preview_returns_original(self, photo, preview):
        cropped = crop_image(photo, ViewRect(x=0, y=0, width=10, height=10), preview)

        assert cropped is photo

    def test_non_finite_image_size_is_unavailable(self):
        crop = compute_crop_rect(
            ViewRect(x=0, y=0, width=10, height=10),
            Size(width=100, height=100),
            Size(width=math.inf, height=300),
        )

        assert crop is None
