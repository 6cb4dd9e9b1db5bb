"""HTTP 接口：把缩放结果转换为 JSON 响应与状态码。"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Optional

from fastapi import APIRouter, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from square_resizer.core.config import ResizeSettings
from square_resizer.core.models import ResizeRequest, ResizeResponse
from square_resizer.core.result import ErrorCode, Failure
from square_resizer.core.storage import ImageStorage
from square_resizer.processing.pipeline import ResizePipeline
from square_resizer.processing.worker import GENERIC_ERROR_MESSAGE

LOGGER = logging.getLogger(__name__)


class ResizeImageBody(BaseModel):
    """``POST /api/image/resize`` 的请求体。

    ``mode`` 保持为任意字符串，是否合法由校验器决定并返回 ``VALIDATION_ERROR``。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source_identifier: str = ""
    mode: Optional[str] = None


def _json(response: ResizeResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.to_dict())


def _failure_response(result: Failure) -> JSONResponse:
    return _json(ResizeResponse(success=False, error_code=result.code, message=result.message))


def create_router(pipeline: ResizePipeline) -> APIRouter:
    """创建绑定了缩放流水线的路由。"""

    router = APIRouter(prefix="/api/image")

    @router.post("/resize")
    async def resize_image(body: ResizeImageBody) -> JSONResponse:
        """将服务端路径上的图片转换为正方形并写入输出目录。"""

        LOGGER.info("收到缩放请求: source=%s mode=%s", body.source_identifier, body.mode or "fit")
        request = ResizeRequest(source=body.source_identifier, mode=body.mode)
        result = await pipeline.resize_file_async(request)
        return _json(ResizeResponse.from_result(result, pipeline.settings.target_size))

    @router.post("/resize/upload")
    async def resize_upload(
        file: Annotated[UploadFile, File(description="待转换的图片文件")],
        mode: Annotated[Optional[str], Form(description="fit 或 crop")] = None,
    ) -> Response:
        """上传图片并直接返回转换后的图片内容。"""

        data = await file.read()
        LOGGER.info("收到上传缩放请求: filename=%s size=%d mode=%s", file.filename, len(data), mode or "fit")
        request = ResizeRequest(source=data, mode=mode, filename=file.filename or None)
        result = await pipeline.resize_bytes_async(request)
        if result.is_failure:
            return _failure_response(result)
        return Response(content=result.value, media_type=request.resolved_output_format.media_type)

    _ = resize_image, resize_upload
    return router


def create_app(
    settings: ResizeSettings,
    storage: Optional[ImageStorage] = None,
    pipeline: Optional[ResizePipeline] = None,
) -> FastAPI:
    """构建 FastAPI 应用。未传入 ``pipeline`` 时按配置新建并在关闭时释放线程池。"""

    owns_pipeline = pipeline is None
    pipeline = pipeline or ResizePipeline(settings, storage)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if owns_pipeline:
            pipeline.close()

    app = FastAPI(title="square-resizer", lifespan=lifespan)
    app.state.pipeline = pipeline
    app.include_router(create_router(pipeline))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.warning("请求格式错误: %s", exc.errors())
        return _json(
            ResizeResponse(success=False, error_code=ErrorCode.VALIDATION_ERROR, message="请求格式不正确")
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        LOGGER.error("发生了意外错误", exc_info=exc)
        message = f"{GENERIC_ERROR_MESSAGE}: {exc}" if settings.development_mode else GENERIC_ERROR_MESSAGE
        return _json(ResizeResponse(success=False, error_code=ErrorCode.INTERNAL_SERVER_ERROR, message=message))

    _ = handle_request_validation, handle_unexpected
    return app
