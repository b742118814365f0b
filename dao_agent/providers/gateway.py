"""ProviderGateway：选择 Provider、发出一次调用、归一化结果。

complete() 永远只返回 GatewaySuccess 或 GatewayFailure 之一，不会把异常抛给调用方，
也不会在本层做重试。
"""

import time
from typing import Callable, Optional

from dao_agent.config.settings import settings as default_settings
from dao_agent.domain.exceptions import TransportError, UpstreamError
from dao_agent.domain.models import (
    Credentials,
    FailureKind,
    GatewayFailure,
    GatewayRequest,
    GatewayResult,
    GatewaySuccess,
)
from dao_agent.infrastructure.logging.logger import logger
from dao_agent.providers import Backend, create_provider, select_backend
from dao_agent.providers.base import ProviderClient


ClientFactory = Callable[[Backend, object], ProviderClient]


class ProviderGateway:
    def __init__(self, settings=None, client_factory: Optional[ClientFactory] = None):
        self._settings = settings or default_settings
        self._client_factory = client_factory or create_provider

    def complete(self, request: GatewayRequest, credentials: Credentials) -> GatewayResult:
        backend = select_backend(credentials)
        if backend is None:
            logger.warning("gateway.unconfigured")
            return GatewayFailure(kind=FailureKind.UNCONFIGURED, detail="AI service not configured")

        log_ctx = {"provider": backend.name, "history": len(request.history)}
        logger.info("gateway.call.start", extra={"extra": log_ctx})
        start = time.monotonic()
        try:
            client = self._client_factory(backend, self._settings)
            text = client.complete(request)
        except UpstreamError as e:
            logger.warning(
                "gateway.call.upstream_error",
                extra={"extra": {**log_ctx, "upstream_status": e.extra.get("upstream_status")}},
            )
            return GatewayFailure(kind=FailureKind.UPSTREAM_ERROR, detail=e.message, provider=backend.name)
        except TransportError as e:
            logger.warning("gateway.call.transport_error", extra={"extra": {**log_ctx, "error": e.message}})
            return GatewayFailure(kind=FailureKind.TRANSPORT_ERROR, detail=e.message, provider=backend.name)
        except Exception as e:
            logger.exception("gateway.call.unexpected_error", extra={"extra": log_ctx})
            return GatewayFailure(
                kind=FailureKind.TRANSPORT_ERROR,
                detail=str(e) or e.__class__.__name__,
                provider=backend.name,
            )
        log_ctx["latency_ms"] = int((time.monotonic() - start) * 1000)
        logger.info("gateway.call.end", extra={"extra": log_ctx})
        return GatewaySuccess(text=text, provider=backend.name)
