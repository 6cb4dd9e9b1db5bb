"""几何计算：fit 尺寸/偏移与 crop 区域。"""

from __future__ import annotations

import pytest

from square_resizer.processing.geometry import CropBox, FitGeometry, compute_crop_box, compute_fit_geometry


def test_fit_landscape_full_hd() -> None:
    geometry = compute_fit_geometry(1920, 1080, 512)

    assert geometry == FitGeometry(width=512, height=288, offset_x=0, offset_y=112)


def test_fit_portrait() -> None:
    geometry = compute_fit_geometry(300, 800, 512)

    assert geometry == FitGeometry(width=192, height=512, offset_x=160, offset_y=0)


def test_fit_square_source_fills_canvas() -> None:
    assert compute_fit_geometry(100, 100, 512) == FitGeometry(512, 512, 0, 0)


def test_fit_odd_remainder_is_truncated() -> None:
    # 512 * 100 / 301 = 170.09 -> 170，剩余 342，两侧各 171
    geometry = compute_fit_geometry(301, 100, 512)
    assert (geometry.width, geometry.height) == (512, 170)
    assert geometry.offset_y == 171

    # 剩余为奇数时偏移向下取整，两侧相差 1
    geometry = compute_fit_geometry(512, 3, 512)
    assert geometry.height == 3
    assert geometry.offset_y == 254
    assert 512 - geometry.height - geometry.offset_y == 255


def test_fit_extreme_ratio_keeps_at_least_one_pixel() -> None:
    geometry = compute_fit_geometry(10000, 1, 64)

    assert geometry.width == 64
    assert geometry.height == 1


@pytest.mark.parametrize(
    ("width", "height", "size"),
    [(1920, 1080, 512), (300, 800, 512), (7, 13, 100), (4000, 3000, 256)],
)
def test_fit_longer_side_equals_size(width: int, height: int, size: int) -> None:
    geometry = compute_fit_geometry(width, height, size)

    assert max(geometry.width, geometry.height) == size
    assert min(geometry.width, geometry.height) <= size
    assert geometry == compute_fit_geometry(width, height, size)


def test_crop_box_is_centered_square() -> None:
    box = compute_crop_box(1920, 1080, 512)

    assert box == CropBox(left=420, top=0, side=1080)
    assert box.as_box() == (420, 0, 1500, 1080)


def test_crop_box_portrait() -> None:
    assert compute_crop_box(600, 1000, 512) == CropBox(left=0, top=200, side=600)


@pytest.mark.parametrize(("width", "height"), [(300, 800), (800, 300), (100, 100)])
def test_crop_box_none_when_source_smaller_than_target(width: int, height: int) -> None:
    assert compute_crop_box(width, height, 512) is None


def test_crop_box_exact_size() -> None:
    assert compute_crop_box(512, 512, 512) == CropBox(0, 0, 512)


@pytest.mark.parametrize(("width", "height", "size"), [(0, 10, 10), (10, -1, 10), (10, 10, 0)])
def test_invalid_dimensions_raise(width: int, height: int, size: int) -> None:
    with pytest.raises(ValueError):
        compute_fit_geometry(width, height, size)
    with pytest.raises(ValueError):
        compute_crop_box(width, height, size)
