"""单个缩放请求的完整处理流程（校验 → 读取 → 缩放 → 写出）。

这里是预期外异常的最外层边界：未分类的异常记录完整堆栈后转换为
``INTERNAL_SERVER_ERROR``，仅开发模式下把异常信息返回给调用方。
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from square_resizer.core.config import ResizeSettings
from square_resizer.core.exceptions import ProcessingAborted
from square_resizer.core.models import OutputFormat, ResizeOutcome, ResizeRequest
from square_resizer.core.result import ErrorCode, Failure, Result, failure, success
from square_resizer.core.storage import ImageStorage
from square_resizer.processing.resizer import ImageResizer
from square_resizer.processing.validation import validate

LOGGER = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "发生了意外错误"


def process_file(
    request: ResizeRequest,
    settings: ResizeSettings,
    storage: ImageStorage,
    resizer: Optional[ImageResizer] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Result[ResizeOutcome]:
    """处理路径来源的请求，结果写入 ``settings.output_directory``。"""

    LOGGER.debug("开始处理: source=%s mode=%s", request.identifier, request.mode or "fit")
    try:
        validation = validate(request, settings, storage)
        if validation.is_failure:
            return validation

        read_result = storage.read_bytes(request.identifier)
        if read_result.is_failure:
            return read_result

        mode = request.resize_mode
        target_size = request.target_size if request.target_size is not None else settings.target_size
        resizer = resizer or ImageResizer(settings)
        resized = resizer.resize_to_square(
            read_result.value,
            target_size,
            mode,
            OutputFormat.from_extension(request.extension),
            cancel_event=cancel_event,
        )
        if resized.is_failure:
            return resized

        output_identifier = storage.compute_output_identifier(
            request.identifier, settings.output_directory, mode, target_size
        )
        write_result = storage.write_bytes(output_identifier, resized.value)
        if write_result.is_failure:
            return write_result
    except ProcessingAborted:
        raise
    except Exception as exc:  # noqa: BLE001
        return _internal_error(exc, settings, request)

    LOGGER.info("处理完成: output=%s mode=%s", output_identifier, mode.value)
    return success(ResizeOutcome(output_identifier=output_identifier, mode_used=mode, size_bytes=len(resized.value)))


def process_bytes(
    request: ResizeRequest,
    settings: ResizeSettings,
    resizer: Optional[ImageResizer] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Result[bytes]:
    """处理字节来源的请求，直接返回编码后的图片字节。"""

    LOGGER.debug("开始处理上传数据: filename=%s mode=%s", request.filename, request.mode or "fit")
    try:
        validation = validate(request, settings)
        if validation.is_failure:
            return validation

        resizer = resizer or ImageResizer(settings)
        return resizer.resize_to_square(
            bytes(request.source),
            request.target_size,
            request.resize_mode,
            request.resolved_output_format,
            cancel_event=cancel_event,
        )
    except ProcessingAborted:
        raise
    except Exception as exc:  # noqa: BLE001
        return _internal_error(exc, settings, request)


def _internal_error(exc: Exception, settings: ResizeSettings, request: ResizeRequest) -> Failure:
    LOGGER.exception("发生了意外错误: source=%s", request.identifier or "<bytes>")
    message = f"{GENERIC_ERROR_MESSAGE}: {exc}" if settings.development_mode else GENERIC_ERROR_MESSAGE
    return failure(ErrorCode.INTERNAL_SERVER_ERROR, message, exc)
