"""fit / crop 两种方式的几何计算（纯函数）。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class FitGeometry:
    """fit 模式下缩放后的尺寸及其在画布上的偏移。"""

    width: int
    height: int
    offset_x: int
    offset_y: int


@dataclass(frozen=True, slots=True)
class CropBox:
    """crop 模式下从源图中切出的正方形区域。"""

    left: int
    top: int
    side: int

    def as_box(self) -> tuple[int, int, int, int]:
        """转换为 Pillow ``crop`` 使用的 (left, upper, right, lower)。"""

        return self.left, self.top, self.left + self.side, self.top + self.side


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def compute_fit_geometry(width: int, height: int, size: int) -> FitGeometry:
    """长边缩放到 ``size``，短边等比缩放，并在 ``size × size`` 画布上居中。"""

    if width <= 0 or height <= 0 or size <= 0:
        raise ValueError(f"尺寸必须为正数: {width}x{height} -> {size}")

    if width > height:
        new_width = size
        new_height = max(1, _round_half_up(size * height / width))
    else:
        new_height = size
        new_width = max(1, _round_half_up(size * width / height))

    return FitGeometry(
        width=new_width,
        height=new_height,
        offset_x=(size - new_width) // 2,
        offset_y=(size - new_height) // 2,
    )


def compute_crop_box(width: int, height: int, size: int) -> Optional[CropBox]:
    """计算居中的正方形裁剪区域。

    源图任一边小于 ``size`` 时返回 ``None``，调用方应直接将整张图拉伸到
    ``size × size``（此时不保持宽高比）。
    """

    if width <= 0 or height <= 0 or size <= 0:
        raise ValueError(f"尺寸必须为正数: {width}x{height} -> {size}")

    if width < size or height < size:
        return None

    side = min(width, height)
    return CropBox(left=(width - side) // 2, top=(height - side) // 2, side=side)
