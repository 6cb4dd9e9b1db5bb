"""图片解码与基础预处理实现。"""

from __future__ import annotations

import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from square_resizer.core.exceptions import ResizerError

LOGGER = logging.getLogger(__name__)


class ImageLoadingError(ResizerError):
    """图片解码失败。"""


def decode_image(data: bytes) -> Image.Image:
    """从字节解码图片，执行 EXIF 旋转并统一到 RGB / RGBA。

    多帧图片（如 GIF 动图）只取第一帧。返回值为新的 Image 对象，调用者负责关闭。
    内存不足与解压炸弹错误不在此处转换，由调用方按处理错误归类。
    """

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()

            # EXIF Orientation 校正
            img = ImageOps.exif_transpose(img)

            return _normalize_mode(img)
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        LOGGER.debug("无法识别图像数据 (%d bytes): %s", len(data), exc)
        raise ImageLoadingError("无法加载图像数据，文件可能已损坏") from exc


def _normalize_mode(img: Image.Image) -> Image.Image:
    """有透明信息时转换为 RGBA，否则转换为 RGB。"""

    if img.mode == "RGBA":
        return img.copy()
    if img.mode in {"LA", "PA"} or (img.mode == "P" and "transparency" in img.info):
        return img.convert("RGBA")
    if img.mode == "RGB":
        return img.copy()

    # P / L / CMYK / I;16 等其他模式直接转换
    return img.convert("RGB")
