"""缩放服务的配置模型与加载逻辑。"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from square_resizer.core.exceptions import InvalidConfigurationError
from square_resizer.utils.colors import parse_color

LOGGER = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp"})
DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class ResizeSettings:
    """进程启动时加载一次的只读配置。"""

    target_width: int = 512
    target_height: int = 512
    allowed_extensions: FrozenSet[str] = DEFAULT_EXTENSIONS
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE
    padding_color: Tuple[int, int, int, int] = (0, 0, 0, 255)
    jpeg_quality: int = 90
    png_compression_level: int = 6
    output_directory: Path = field(default_factory=lambda: Path("output"))
    input_directory: Optional[Path] = None
    development_mode: bool = False

    def __post_init__(self) -> None:
        # 扩展名统一小写存储，便于大小写不敏感匹配。
        extensions = frozenset(
            ext.lower() if isinstance(ext, str) else ext for ext in (self.allowed_extensions or ())
        )
        object.__setattr__(self, "allowed_extensions", extensions)

        errors: list[str] = []
        # 允许直接传入 HEX 字符串或 3 分量颜色。
        try:
            object.__setattr__(self, "padding_color", parse_color(self.padding_color))
        except InvalidConfigurationError as exc:
            errors.append(f"padding_color 无效: {exc}")
        except TypeError:
            errors.append(f"padding_color 必须是 HEX 字符串或整数分量序列: {self.padding_color!r}")

        # Path("") 会变成 "."，所以空字符串要在转换前检查。
        if not str(self.output_directory).strip():
            errors.append("output_directory 不能为空")
        object.__setattr__(self, "output_directory", Path(self.output_directory))
        if self.input_directory is not None:
            object.__setattr__(self, "input_directory", Path(self.input_directory))

        errors.extend(validate_settings(self))
        if errors:
            raise InvalidConfigurationError("; ".join(errors))

    @property
    def target_size(self) -> int:
        """正方形输出边长。"""

        return self.target_width


def validate_settings(settings: ResizeSettings) -> list[str]:
    """收集所有不合法的配置项，返回错误描述列表。"""

    errors: list[str] = []

    if settings.target_width <= 0:
        errors.append("target_width 必须为正整数")
    if settings.target_height <= 0:
        errors.append("target_height 必须为正整数")

    if not settings.allowed_extensions:
        errors.append("allowed_extensions 至少需要一个扩展名")
    else:
        invalid = sorted(
            repr(ext) for ext in settings.allowed_extensions if not isinstance(ext, str) or not ext.startswith(".")
        )
        if invalid:
            errors.append(f"allowed_extensions 含有无效扩展名: {', '.join(invalid)}")

    if settings.max_file_size_bytes <= 0:
        errors.append("max_file_size_bytes 必须为正整数")

    if not 1 <= settings.jpeg_quality <= 100:
        errors.append("jpeg_quality 必须在 1-100 范围内")
    if not 0 <= settings.png_compression_level <= 9:
        errors.append("png_compression_level 必须在 0-9 范围内")

    return errors


_FIELD_NAMES = {f.name for f in fields(ResizeSettings)}


def settings_from_mapping(data: Mapping[str, Any]) -> ResizeSettings:
    """根据字典（通常来自 JSON 配置文件）构建配置对象。"""

    unknown = sorted(set(data) - _FIELD_NAMES)
    if unknown:
        raise InvalidConfigurationError(f"未知的配置项: {', '.join(unknown)}")

    kwargs: dict[str, Any] = dict(data)
    if "allowed_extensions" in kwargs:
        kwargs["allowed_extensions"] = _as_extensions(kwargs["allowed_extensions"])
    for key in ("output_directory", "input_directory"):
        if kwargs.get(key) is not None:
            kwargs[key] = Path(kwargs[key]).expanduser()

    try:
        return ResizeSettings(**kwargs)
    except TypeError as exc:
        raise InvalidConfigurationError(f"配置项类型错误: {exc}") from exc


def load_settings(path: Optional[Union[str, Path]] = None, **overrides: Any) -> ResizeSettings:
    """加载 JSON 配置文件；未指定路径时使用默认配置。

    ``overrides`` 中值不为 ``None`` 的项会覆盖文件中的同名配置。
    """

    data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path).expanduser()
        try:
            with config_path.open("r", encoding="utf-8") as handle:
                loaded = json.load(handle)
        except OSError as exc:
            raise InvalidConfigurationError(f"无法读取配置文件: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise InvalidConfigurationError(f"配置文件不是合法的 JSON: {config_path}") from exc
        if not isinstance(loaded, dict):
            raise InvalidConfigurationError(f"配置文件顶层必须是对象: {config_path}")
        data.update(loaded)
        LOGGER.debug("已加载配置文件 %s", config_path)

    data.update({key: value for key, value in overrides.items() if value is not None})
    return settings_from_mapping(data)


def _as_extensions(value: Union[str, Iterable[str]]) -> FrozenSet[str]:
    if isinstance(value, str):
        value = [value]
    return frozenset(value)
