"""处理结果（Success / Failure）与错误码定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, NoReturn, Optional, TypeVar, Union

from square_resizer.core.exceptions import ResizerError

T = TypeVar("T")


class ErrorCode(str, Enum):
    """封闭的错误码集合。"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"
    IMAGE_LOAD_ERROR = "IMAGE_LOAD_ERROR"
    IMAGE_PROCESSING_ERROR = "IMAGE_PROCESSING_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    @property
    def http_status(self) -> int:
        """对应的 HTTP 状态码。"""

        return _HTTP_STATUS.get(self, 500)


_HTTP_STATUS = {
    ErrorCode.FILE_NOT_FOUND: 404,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.UNSUPPORTED_FORMAT: 400,
    ErrorCode.FILE_TOO_LARGE: 400,
    ErrorCode.IMAGE_LOAD_ERROR: 400,
}


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """成功结果，只携带值。"""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    """失败结果，始终携带非空错误码。

    ``cause`` 仅用于日志记录，不参与比较，也不会出现在面向调用方的消息中。
    """

    code: ErrorCode
    message: str
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("失败结果必须携带错误码")
        if not isinstance(self.code, ErrorCode):
            object.__setattr__(self, "code", ErrorCode(self.code))

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ResizerError(f"{self.code.value}: {self.message}") from self.cause


Result = Union[Success[T], Failure]


def success(value: T = None) -> Success[T]:
    """构造成功结果；无返回值的操作使用 ``success()``。"""

    return Success(value)


def failure(code: ErrorCode, message: str, cause: Optional[BaseException] = None) -> Failure:
    """构造失败结果。"""

    return Failure(code=code, message=message, cause=cause)
