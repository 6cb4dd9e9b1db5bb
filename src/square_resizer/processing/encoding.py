"""按输出格式编码图片。

各格式的编码参数集中在 ``ENCODERS`` 表中，新增格式只需增加一项。
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Callable

from PIL import Image

from square_resizer.core.config import ResizeSettings
from square_resizer.core.models import OutputFormat


@dataclass(frozen=True, slots=True)
class EncoderSpec:
    """单个输出格式的编码配置。"""

    pil_format: str
    keeps_alpha: bool
    options: Callable[[ResizeSettings], dict[str, Any]]


def _no_options(settings: ResizeSettings) -> dict[str, Any]:
    return {}


ENCODERS: dict[OutputFormat, EncoderSpec] = {
    OutputFormat.JPEG: EncoderSpec("JPEG", False, lambda s: {"quality": s.jpeg_quality}),
    OutputFormat.PNG: EncoderSpec("PNG", True, lambda s: {"compress_level": s.png_compression_level}),
    OutputFormat.GIF: EncoderSpec("GIF", False, _no_options),
    OutputFormat.BMP: EncoderSpec("BMP", False, _no_options),
}


def encode_image(image: Image.Image, output_format: OutputFormat, settings: ResizeSettings) -> bytes:
    """将图片编码为指定格式的字节；未知格式按 PNG 处理。"""

    encoder = ENCODERS.get(output_format, ENCODERS[OutputFormat.PNG])
    prepared = _prepare_mode(image, encoder.keeps_alpha, settings.padding_color[:3])

    buffer = io.BytesIO()
    prepared.save(buffer, format=encoder.pil_format, **encoder.options(settings))
    return buffer.getvalue()


def _prepare_mode(image: Image.Image, keeps_alpha: bool, background: tuple[int, ...]) -> Image.Image:
    """完全不透明的图片统一转 RGB；不支持透明的格式把 Alpha 混合到背景色上。"""

    if image.mode != "RGBA":
        return image if image.mode == "RGB" else image.convert("RGB")

    alpha_min, _ = image.getchannel("A").getextrema()
    if alpha_min == 255:
        return image.convert("RGB")
    if keeps_alpha:
        return image

    flattened = Image.new("RGB", image.size, tuple(background))
    flattened.paste(image, mask=image.getchannel("A"))
    return flattened
