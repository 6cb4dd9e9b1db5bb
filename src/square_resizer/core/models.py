"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from square_resizer.core.result import ErrorCode, Result

Source = Union[str, Path, bytes]


class ResizeMode(str, Enum):
    """正方形化方式：fit 保持比例并留边，crop 居中裁剪后拉伸。"""

    FIT = "fit"
    CROP = "crop"

    @classmethod
    def parse(cls, value: Union["ResizeMode", str, None]) -> Optional["ResizeMode"]:
        """解析模式字符串（大小写不敏感）；未指定时为 fit，无法识别时返回 ``None``。"""

        if isinstance(value, ResizeMode):
            return value
        if value is None or value == "":
            return cls.FIT
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError):
            return None


class OutputFormat(str, Enum):
    """支持的输出编码格式。"""

    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    BMP = "BMP"

    @classmethod
    def from_extension(cls, extension: Optional[str]) -> "OutputFormat":
        """根据扩展名选择输出格式，未知扩展名回退为 PNG。"""

        return _EXTENSION_FORMATS.get((extension or "").lower(), cls.PNG)

    @property
    def extension(self) -> str:
        return _CANONICAL_EXTENSIONS[self]

    @property
    def media_type(self) -> str:
        return f"image/{self.value.lower()}"


_EXTENSION_FORMATS = {
    ".jpg": OutputFormat.JPEG,
    ".jpeg": OutputFormat.JPEG,
    ".png": OutputFormat.PNG,
    ".gif": OutputFormat.GIF,
    ".bmp": OutputFormat.BMP,
}

_CANONICAL_EXTENSIONS = {
    OutputFormat.JPEG: ".jpg",
    OutputFormat.PNG: ".png",
    OutputFormat.GIF: ".gif",
    OutputFormat.BMP: ".bmp",
}


@dataclass(frozen=True, slots=True)
class ResizeRequest:
    """单次缩放请求，来源可以是路径（标识符）或原始字节。"""

    source: Source
    mode: Union[ResizeMode, str, None] = None
    target_size: Optional[int] = None
    output_format: Optional[OutputFormat] = None
    filename: Optional[str] = None

    @property
    def is_bytes(self) -> bool:
        return isinstance(self.source, (bytes, bytearray, memoryview))

    @property
    def identifier(self) -> str:
        """路径形式的来源标识符；字节来源返回文件名提示（可能为空）。"""

        if self.is_bytes:
            return self.filename or ""
        return str(self.source) if self.source is not None else ""

    @property
    def extension(self) -> str:
        """用于白名单校验的小写扩展名。"""

        name = self.identifier
        if name:
            return Path(name).suffix.lower()
        if self.is_bytes:
            return (self.output_format or OutputFormat.PNG).extension
        return ""

    @property
    def resize_mode(self) -> ResizeMode:
        """校验通过后使用的模式。"""

        mode = ResizeMode.parse(self.mode)
        if mode is None:
            raise ValueError(f"无效的变换方式: {self.mode}")
        return mode

    @property
    def resolved_output_format(self) -> OutputFormat:
        if self.output_format is not None:
            return self.output_format
        return OutputFormat.from_extension(self.extension)


@dataclass(frozen=True, slots=True)
class ResizeOutcome:
    """写盘成功后的处理结果。"""

    output_identifier: str
    mode_used: ResizeMode
    size_bytes: int


@dataclass(frozen=True, slots=True)
class ResizeResponse:
    """面向调用方（HTTP / CLI）的响应结构。"""

    success: bool
    message: str = ""
    output_identifier: Optional[str] = None
    mode_used: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    @classmethod
    def from_result(cls, result: Result[ResizeOutcome], target_size: Optional[int] = None) -> "ResizeResponse":
        if result.is_failure:
            return cls(success=False, error_code=result.code, message=result.message)

        outcome = result.value
        size_label = f"{target_size}×{target_size}" if target_size else "正方形"
        return cls(
            success=True,
            message=f"图片已转换为 {size_label}",
            output_identifier=outcome.output_identifier,
            mode_used=outcome.mode_used.value,
        )

    @property
    def status_code(self) -> int:
        if self.success:
            return 200
        return self.error_code.http_status if self.error_code else 500

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "message": self.message,
                "outputIdentifier": self.output_identifier,
                "modeUsed": self.mode_used,
            }
        return {
            "success": False,
            "errorCode": self.error_code.value if self.error_code else ErrorCode.INTERNAL_SERVER_ERROR.value,
            "message": self.message,
        }
