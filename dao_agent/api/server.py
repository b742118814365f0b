"""FastAPI application exposing the DAO agent endpoint."""

from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from dao_agent.api.service import AgentEndpoint, get_default_endpoint
from dao_agent.config.settings import settings
from dao_agent.domain.exceptions import ClientInputError
from dao_agent.domain.models import Credentials
from dao_agent.infrastructure.logging.logger import logger

app = FastAPI(title="DAO Governance Agent", version="0.1.0")


def get_endpoint() -> AgentEndpoint:
    return get_default_endpoint()


def get_settings():
    return settings


@app.post("/api/dao-agent")
async def dao_agent(request: Request, endpoint: AgentEndpoint = Depends(get_endpoint)) -> JSONResponse:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        err = ClientInputError()
        logger.info("endpoint.invalid_payload", extra={"extra": {"reason": "json"}})
        return JSONResponse({"error": err.message}, status_code=err.http_status)
    # Outbound provider calls are blocking; keep them off the event loop.
    response = await run_in_threadpool(endpoint.handle, payload)
    return JSONResponse(response.body, status_code=response.status)


@app.get("/health")
def health(cfg=Depends(get_settings)) -> Dict[str, Any]:
    return {"status": "ok", "configured": Credentials.from_settings(cfg).is_configured}


@app.api_route("/.well-known/{path:path}", methods=["GET", "HEAD"])
def well_known(path: str) -> JSONResponse:
    return JSONResponse({}, status_code=404)
