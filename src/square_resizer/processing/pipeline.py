"""缩放任务的线程池调度。

解码、变换、编码都是 CPU 与内存密集型的阻塞操作，统一交给工作线程执行，
接收请求的线程（如 asyncio 事件循环）只负责等待结果。
"""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from square_resizer.core.config import ResizeSettings
from square_resizer.core.models import ResizeOutcome, ResizeRequest
from square_resizer.core.result import Result
from square_resizer.core.storage import FileSystemImageStorage, ImageStorage
from square_resizer.processing.resizer import ImageResizer
from square_resizer.processing.worker import process_bytes, process_file

LOGGER = logging.getLogger(__name__)


class ResizePipeline:
    """持有配置、存储与线程池的缩放入口。"""

    def __init__(
        self,
        settings: ResizeSettings,
        storage: Optional[ImageStorage] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.settings = settings
        self.storage = storage or FileSystemImageStorage(settings.input_directory)
        self.resizer = ImageResizer(settings)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="resize-worker")

    def resize_file(self, request: ResizeRequest, cancel_event: Optional[threading.Event] = None) -> Result[ResizeOutcome]:
        """在当前线程同步处理路径来源的请求。"""

        return process_file(request, self.settings, self.storage, self.resizer, cancel_event)

    def resize_bytes(self, request: ResizeRequest, cancel_event: Optional[threading.Event] = None) -> Result[bytes]:
        """在当前线程同步处理字节来源的请求。"""

        return process_bytes(request, self.settings, self.resizer, cancel_event)

    def submit_file(
        self, request: ResizeRequest, cancel_event: Optional[threading.Event] = None
    ) -> "Future[Result[ResizeOutcome]]":
        return self._executor.submit(self.resize_file, request, cancel_event)

    def submit_bytes(
        self, request: ResizeRequest, cancel_event: Optional[threading.Event] = None
    ) -> "Future[Result[bytes]]":
        return self._executor.submit(self.resize_bytes, request, cancel_event)

    async def resize_file_async(
        self, request: ResizeRequest, cancel_event: Optional[threading.Event] = None
    ) -> Result[ResizeOutcome]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(self.resize_file, request, cancel_event))

    async def resize_bytes_async(
        self, request: ResizeRequest, cancel_event: Optional[threading.Event] = None
    ) -> Result[bytes]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(self.resize_bytes, request, cancel_event))

    def close(self) -> None:
        LOGGER.debug("关闭缩放线程池")
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "ResizePipeline":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
