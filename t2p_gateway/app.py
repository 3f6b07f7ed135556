"""FastAPI application for the T2P gateway.

Routes (all under ``/api/v1``):
- GET  /account/credit-balance
- POST /insurance/plans
- POST /insurance/plans/confirm

The routes are thin: they decode the JSON body, hand it to the InsuranceGateway
and serialize whatever GatewayResponse comes back. Unknown routes answer 404 and
unhandled exceptions answer 500, both with an ``{error, message}`` body.
"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from t2p_gateway import __version__
from t2p_gateway.client import T2PClient
from t2p_gateway.config import Settings, load_settings
from t2p_gateway.errors import ErrorResponse
from t2p_gateway.runtime import GatewayResponse, InsuranceGateway

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

router = APIRouter()


async def _read_json(request: Request) -> Any:
    """Decoded body: {} when the body is empty, None when it is not valid JSON."""
    if not await request.body():
        return {}
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _to_response(response: GatewayResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.body)


@router.get("/account/credit-balance")
async def credit_balance(request: Request) -> JSONResponse:
    gateway: InsuranceGateway = request.app.state.gateway
    return _to_response(await gateway.check_credit_balance())


@router.post("/insurance/plans")
async def insurance_plans(request: Request) -> JSONResponse:
    gateway: InsuranceGateway = request.app.state.gateway
    return _to_response(await gateway.search_plans(await _read_json(request)))


@router.post("/insurance/plans/confirm")
async def insurance_plans_confirm(request: Request) -> JSONResponse:
    gateway: InsuranceGateway = request.app.state.gateway
    return _to_response(await gateway.confirm_purchase(await _read_json(request)))


def create_app(settings: Optional[Settings] = None, gateway: Optional[InsuranceGateway] = None) -> FastAPI:
    """Build the gateway application.

    Args:
        settings: Settings to build the default client from; loaded from the
            environment when neither settings nor gateway is given
        gateway: Pre-built gateway (tests inject one backed by a mock transport)

    Returns:
        A configured FastAPI application
    """
    if gateway is None:
        gateway = InsuranceGateway(T2PClient(settings or load_settings()))

    app = FastAPI(
        title="T2P Gateway",
        description="Request validation in front of the Tune2Protect insurance API",
        version=__version__,
    )
    app.state.gateway = gateway
    app.include_router(router, prefix=API_PREFIX)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unmatched paths and unmatched methods are both "not found"
        if exc.status_code in (404, 405):
            body = ErrorResponse(error="Not Found", message=f"Cannot {request.method} {request.url.path}")
            return JSONResponse(status_code=404, content=body.to_dict())
        body = ErrorResponse(error="Error", message=str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=body.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        body = ErrorResponse(error="Internal Server Error", message=str(exc))
        return JSONResponse(status_code=500, content=body.to_dict())

    return app


__all__ = [
    "API_PREFIX",
    "create_app",
]
