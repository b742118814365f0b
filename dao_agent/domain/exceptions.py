"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 Gateway 层或 API 层做统一捕获与转换。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "API_ERROR"）。
        message: 可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、上游状态码等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ClientInputError(BusinessError):
    """请求体格式错误，在任何外部调用之前检出。"""

    def __init__(self, message: str = "Invalid messages format", **extra):
        super().__init__(code="INVALID_MESSAGES", message=message, http_status=400, **extra)


class ConfigurationError(BusinessError):
    """没有可用的凭据。错误信息不能透露缺的是哪一个 key。"""

    def __init__(self, message: str = "AI service not configured", **extra):
        super().__init__(code="AI_NOT_CONFIGURED", message=message, http_status=503, **extra)


class UpstreamError(BusinessError):
    """Provider 可达但返回了非 2xx 状态，message 为原始响应体。"""

    def __init__(self, message: str, upstream_status: int, **extra):
        super().__init__(
            code="API_ERROR",
            message=message,
            http_status=502,
            upstream_status=upstream_status,
            **extra,
        )


class TransportError(BusinessError):
    """网络层或解析错误：连接失败、超时、响应 JSON 不符合预期等。"""

    def __init__(self, message: str, **extra):
        super().__init__(code="NETWORK_ERROR", message=message, http_status=500, **extra)
