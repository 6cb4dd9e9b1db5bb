"""项目内使用的自定义异常定义。

预期内的失败（校验不通过、解码失败等）通过 ``Result`` 返回，不走异常；
这里只保留配置错误、主动取消与 ``Failure.unwrap`` 使用的异常类型。
"""


class ResizerError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(ResizerError):
    """配置不合法时抛出。"""


class ProcessingAborted(ResizerError):
    """任务被调用方取消时抛出。"""
