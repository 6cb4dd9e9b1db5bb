"""测试公用夹具。"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest
from PIL import Image

from square_resizer.core.config import ResizeSettings
from square_resizer.core.storage import FileSystemImageStorage


@pytest.fixture
def settings(tmp_path: Path) -> ResizeSettings:
    return ResizeSettings(output_directory=tmp_path / "output")


@pytest.fixture
def storage() -> FileSystemImageStorage:
    return FileSystemImageStorage()


@pytest.fixture
def write_image(tmp_path: Path) -> Callable[..., Path]:
    """在临时输入目录中生成纯色图片，返回文件路径。"""

    source_dir = tmp_path / "input"
    source_dir.mkdir()

    def _write(name: str, size: tuple[int, int] = (64, 64), color: object = "blue", fmt: Optional[str] = None) -> Path:
        path = source_dir / name
        Image.new("RGB", size, color).save(path, format=fmt)
        return path

    return _write
