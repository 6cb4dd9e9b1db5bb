"""图片读写与输出路径生成。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from square_resizer.core.models import ResizeMode
from square_resizer.core.result import ErrorCode, Result, failure, success

LOGGER = logging.getLogger(__name__)


class ImageStorage(Protocol):
    """缩放核心依赖的存储协作者。"""

    def read_bytes(self, identifier: str) -> Result[bytes]:
        ...

    def write_bytes(self, identifier: str, data: bytes) -> Result[None]:
        ...

    def exists(self, identifier: str) -> bool:
        ...

    def file_size(self, identifier: str) -> int:
        ...

    def compute_output_identifier(
        self,
        input_identifier: str,
        output_directory: Union[str, Path],
        mode: ResizeMode,
        target_size: int,
    ) -> str:
        ...


def output_file_name(input_identifier: str, mode: ResizeMode, target_size: int) -> str:
    """按 ``{stem}_{N}x{N}[_crop]{suffix}`` 规则生成输出文件名。"""

    source = Path(input_identifier)
    suffix = f"_{target_size}x{target_size}"
    if mode is ResizeMode.CROP:
        suffix += "_crop"
    return f"{source.stem}{suffix}{source.suffix}"


class FileSystemImageStorage:
    """基于本地文件系统的存储实现。

    相对路径的标识符在配置了 ``input_directory`` 时相对于该目录解析。
    """

    def __init__(self, input_directory: Optional[Path] = None) -> None:
        self.input_directory = input_directory

    def resolve(self, identifier: str) -> Path:
        path = Path(identifier)
        if self.input_directory is not None and not path.is_absolute():
            return self.input_directory / path
        return path

    def exists(self, identifier: str) -> bool:
        return self.resolve(identifier).is_file()

    def file_size(self, identifier: str) -> int:
        return self.resolve(identifier).stat().st_size

    def read_bytes(self, identifier: str) -> Result[bytes]:
        path = self.resolve(identifier)
        LOGGER.debug("读取图片文件: %s", path)

        if not path.is_file():
            LOGGER.warning("文件不存在: %s", path)
            return failure(ErrorCode.FILE_NOT_FOUND, f"文件不存在: {identifier}")

        try:
            data = path.read_bytes()
        except PermissionError as exc:
            LOGGER.error("没有读取权限: %s", path, exc_info=exc)
            return failure(ErrorCode.FILE_READ_ERROR, f"没有文件的读取权限: {identifier}", exc)
        except OSError as exc:
            LOGGER.error("读取文件失败: %s", path, exc_info=exc)
            return failure(ErrorCode.FILE_READ_ERROR, f"读取文件失败: {identifier}", exc)

        LOGGER.debug("读取完成: %s (%d bytes)", path, len(data))
        return success(data)

    def write_bytes(self, identifier: str, data: bytes) -> Result[None]:
        path = Path(identifier)
        LOGGER.debug("写入图片文件: %s", path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except PermissionError as exc:
            LOGGER.error("没有写入权限: %s", path, exc_info=exc)
            return failure(ErrorCode.FILE_WRITE_ERROR, f"没有文件的写入权限: {identifier}", exc)
        except OSError as exc:
            LOGGER.error("写入文件失败: %s", path, exc_info=exc)
            return failure(ErrorCode.FILE_WRITE_ERROR, f"写入文件失败: {identifier}", exc)

        LOGGER.debug("写入完成: %s (%d bytes)", path, len(data))
        return success()

    def compute_output_identifier(
        self,
        input_identifier: str,
        output_directory: Union[str, Path],
        mode: ResizeMode,
        target_size: int,
    ) -> str:
        return str(Path(output_directory) / output_file_name(input_identifier, mode, target_size))
