"""正方形缩放：解码 → 几何变换 → 编码。"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Union

from PIL import Image

from square_resizer.core.config import ResizeSettings
from square_resizer.core.exceptions import ProcessingAborted
from square_resizer.core.models import OutputFormat, ResizeMode
from square_resizer.core.result import ErrorCode, Result, failure, success
from square_resizer.processing.encoding import encode_image
from square_resizer.processing.geometry import compute_crop_box, compute_fit_geometry
from square_resizer.processing.image_loader import ImageLoadingError, decode_image

LOGGER = logging.getLogger(__name__)

_RESAMPLING = Image.Resampling.LANCZOS


class ImageResizer:
    """把任意图片转换为 ``size × size`` 的正方形图片。

    实例不保存调用间的状态，可在多个线程中共享。
    """

    def __init__(self, settings: ResizeSettings) -> None:
        self.settings = settings

    def resize_to_square(
        self,
        image_bytes: bytes,
        size: Optional[int] = None,
        mode: Union[ResizeMode, str, None] = ResizeMode.FIT,
        output_format: Optional[OutputFormat] = OutputFormat.PNG,
        cancel_event: Optional[threading.Event] = None,
    ) -> Result[bytes]:
        """执行缩放并返回编码后的字节。

        ``cancel_event`` 只在解码、变换、编码三个阶段之间检查，
        被设置时抛出 ``ProcessingAborted``。
        """

        if size is None:
            size = self.settings.target_size
        resize_mode = ResizeMode.parse(mode)
        if resize_mode is None:
            return failure(ErrorCode.VALIDATION_ERROR, f"无效的变换方式: {mode}。有效值为 'fit' 或 'crop'")
        if size <= 0:
            return failure(ErrorCode.VALIDATION_ERROR, f"目标尺寸必须为正整数: {size}")
        output_format = output_format or OutputFormat.PNG

        LOGGER.debug("开始缩放: size=%d mode=%s format=%s", size, resize_mode.value, output_format.value)
        try:
            with decode_image(image_bytes) as image:
                _raise_if_cancelled(cancel_event, "decode")
                transformed = self._transform(image, size, resize_mode)
            with transformed:
                _raise_if_cancelled(cancel_event, "transform")
                data = encode_image(transformed, output_format, self.settings)
        except ProcessingAborted:
            raise
        except ImageLoadingError as exc:
            LOGGER.error("无效的图像数据: mode=%s", resize_mode.value, exc_info=exc)
            return failure(ErrorCode.IMAGE_LOAD_ERROR, str(exc), exc)
        except (MemoryError, Image.DecompressionBombError) as exc:
            LOGGER.error("图像过大或内存不足: mode=%s", resize_mode.value, exc_info=exc)
            return failure(ErrorCode.IMAGE_PROCESSING_ERROR, "图像缩放过程中内存不足", exc)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("图像缩放处理失败: mode=%s", resize_mode.value)
            return failure(ErrorCode.IMAGE_PROCESSING_ERROR, self._describe(exc), exc)

        LOGGER.debug("缩放完成: size=%d mode=%s result=%d bytes", size, resize_mode.value, len(data))
        return success(data)

    def _transform(self, image: Image.Image, size: int, mode: ResizeMode) -> Image.Image:
        if mode is ResizeMode.CROP:
            return self._crop(image, size)
        return self._fit(image, size)

    def _fit(self, image: Image.Image, size: int) -> Image.Image:
        """保持宽高比缩放，并居中贴到填充色画布上。"""

        geometry = compute_fit_geometry(image.width, image.height, size)
        resized = image.resize((geometry.width, geometry.height), _RESAMPLING)

        canvas = Image.new("RGBA", (size, size), self.settings.padding_color)
        with resized:
            canvas.alpha_composite(resized.convert("RGBA"), dest=(geometry.offset_x, geometry.offset_y))
        return canvas

    def _crop(self, image: Image.Image, size: int) -> Image.Image:
        """居中裁剪正方形后拉伸；源图小于目标尺寸时直接拉伸整张图。"""

        box = compute_crop_box(image.width, image.height, size)
        if box is None:
            LOGGER.debug("源图 %dx%d 小于目标尺寸 %d，直接拉伸", image.width, image.height, size)
            return image.resize((size, size), _RESAMPLING)

        with image.crop(box.as_box()) as cropped:
            return cropped.resize((size, size), _RESAMPLING)

    def _describe(self, exc: Exception) -> str:
        if self.settings.development_mode:
            return f"图像缩放处理失败: {exc}"
        return "图像缩放处理失败"


def _raise_if_cancelled(cancel_event: Optional[threading.Event], stage: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        LOGGER.info("缩放任务在 %s 阶段后被取消", stage)
        raise ProcessingAborted(f"任务在 {stage} 阶段后被取消")
