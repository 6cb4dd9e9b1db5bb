"""测试用的图片构造工具。"""

from __future__ import annotations

import io

from PIL import Image


def encode(image: Image.Image, fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def make_image_bytes(size: tuple[int, int], color: object = "white", fmt: str = "PNG", mode: str = "RGB") -> bytes:
    return encode(Image.new(mode, size, color), fmt)


def open_bytes(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image
