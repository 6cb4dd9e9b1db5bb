"""缩放请求的前置校验。

校验按固定顺序执行，遇到第一个失败即返回，后一项默认前面各项均已通过：

1. 来源非空
2. 路径不含 ``..`` 或 ``~``（字节来源跳过）
3. 模式为 fit / crop（大小写不敏感，未指定视为 fit）
4. 来源存在
5. 扩展名在白名单内
6. 字节数不超过上限

除存在性与大小的只读探测外，不读取任何图片内容。
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from square_resizer.core.config import ResizeSettings
from square_resizer.core.models import ResizeMode, ResizeRequest
from square_resizer.core.result import ErrorCode, Failure, Result, failure, success
from square_resizer.core.storage import ImageStorage

LOGGER = logging.getLogger(__name__)

TRAVERSAL_PATTERNS = ("..", "~")

Check = Callable[[ResizeRequest, ResizeSettings, Optional[ImageStorage]], Optional[Failure]]


def _check_presence(request: ResizeRequest, settings: ResizeSettings, storage: Optional[ImageStorage]) -> Optional[Failure]:
    if request.is_bytes:
        if len(request.source) == 0:
            return failure(ErrorCode.VALIDATION_ERROR, "图片数据为空")
        return None
    if request.source is None or not str(request.source).strip():
        return failure(ErrorCode.VALIDATION_ERROR, "未指定文件路径")
    return None


def _check_traversal(request: ResizeRequest, settings: ResizeSettings, storage: Optional[ImageStorage]) -> Optional[Failure]:
    if request.is_bytes:
        return None
    if any(pattern in request.identifier for pattern in TRAVERSAL_PATTERNS):
        return failure(ErrorCode.VALIDATION_ERROR, "无效的文件路径")
    return None


def _check_mode(request: ResizeRequest, settings: ResizeSettings, storage: Optional[ImageStorage]) -> Optional[Failure]:
    if ResizeMode.parse(request.mode) is None:
        return failure(
            ErrorCode.VALIDATION_ERROR,
            f"无效的变换方式: {request.mode}。有效值为 'fit' 或 'crop'",
        )
    return None


def _check_exists(request: ResizeRequest, settings: ResizeSettings, storage: Optional[ImageStorage]) -> Optional[Failure]:
    if request.is_bytes:
        return None
    if storage is None or not storage.exists(request.identifier):
        return failure(ErrorCode.FILE_NOT_FOUND, f"文件不存在: {request.identifier}")
    return None


def _check_extension(request: ResizeRequest, settings: ResizeSettings, storage: Optional[ImageStorage]) -> Optional[Failure]:
    extension = request.extension
    if extension not in settings.allowed_extensions:
        return failure(ErrorCode.UNSUPPORTED_FORMAT, f"不支持的图片格式: {extension or '(无扩展名)'}")
    return None


def _check_size(request: ResizeRequest, settings: ResizeSettings, storage: Optional[ImageStorage]) -> Optional[Failure]:
    if request.is_bytes:
        size = len(request.source)
    else:
        assert storage is not None
        try:
            size = storage.file_size(request.identifier)
        except OSError as exc:
            return failure(ErrorCode.FILE_READ_ERROR, f"无法读取文件大小: {request.identifier}", exc)

    if size > settings.max_file_size_bytes:
        limit_mb = settings.max_file_size_bytes / (1024 * 1024)
        return failure(ErrorCode.FILE_TOO_LARGE, f"文件过大，上限为 {limit_mb:g}MB")
    return None


CHECKS: tuple[Check, ...] = (
    _check_presence,
    _check_traversal,
    _check_mode,
    _check_exists,
    _check_extension,
    _check_size,
)


def validate(
    request: ResizeRequest,
    settings: ResizeSettings,
    storage: Optional[ImageStorage] = None,
) -> Result[None]:
    """按固定顺序校验请求，返回第一个失败或 ``Success(None)``。"""

    for check in CHECKS:
        outcome = check(request, settings, storage)
        if outcome is not None:
            LOGGER.warning("请求校验失败 [%s]: %s", outcome.code.value, outcome.message)
            return outcome
    return success()
