"""Tool endpoint: JSON-RPC 2.0 over POST (initialize, tools/list, tools/call).

Caller context travels alongside the RPC message as a top-level "context"
object ({"userId", "displayName", "conversationId"}), injected by the
platform gateway.
"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from app.config import settings
from app.schemas.email import CallerContext, SendEmailInput
from app.services.analytics import AnalyticsSink, get_default_sink
from app.services.email_sender import send_email
from app.services.resend import ResendClient

router = APIRouter()
logger = logging.getLogger(__name__)

SERVER_INFO = {"name": "email-simple", "version": "0.0.2"}
PROTOCOL_VERSION = "2025-03-26"

# JSON-RPC error codes
METHOD_NOT_ALLOWED = -32000
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

SEND_EMAIL_TOOL = {
    "name": "send_email",
    "description": "Send an email to a recipient with optional HTML formatting",
    "inputSchema": SendEmailInput.model_json_schema(),
}


def get_resend_client() -> ResendClient:
    return ResendClient(settings.resend_api_key)


def get_analytics_sink() -> Optional[AnalyticsSink]:
    return get_default_sink()


def _rpc_result(rpc_id: Any, result: dict[str, Any]) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "result": result, "id": rpc_id})


def _rpc_error(
    code: int,
    message: str,
    rpc_id: Any = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": rpc_id},
        status_code=status_code,
    )


@router.post("")
async def handle_rpc(
    request: Request,
    client: ResendClient = Depends(get_resend_client),
    sink: Optional[AnalyticsSink] = Depends(get_analytics_sink),
) -> Response:
    try:
        body = await request.json()
    except ValueError as e:
        logger.error("Error handling tool request: %s", e)
        return _rpc_error(INTERNAL_ERROR, "Internal server error", status_code=500)

    if not isinstance(body, dict):
        logger.error("Error handling tool request: body is not a JSON object")
        return _rpc_error(INTERNAL_ERROR, "Internal server error", status_code=500)

    rpc_id = body.get("id")
    method = body.get("method")

    if isinstance(method, str) and method.startswith("notifications/"):
        return Response(status_code=status.HTTP_202_ACCEPTED)

    if method == "initialize":
        return _rpc_result(rpc_id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": SERVER_INFO,
        })

    if method == "tools/list":
        return _rpc_result(rpc_id, {"tools": [SEND_EMAIL_TOOL]})

    if method != "tools/call":
        return _rpc_error(METHOD_NOT_FOUND, f"Method not found: {method}", rpc_id)

    params = body.get("params") or {}
    if not isinstance(params, dict):
        return _rpc_error(INVALID_PARAMS, "params must be an object", rpc_id)

    tool_name = params.get("name")
    if tool_name != SEND_EMAIL_TOOL["name"]:
        return _rpc_error(INVALID_PARAMS, f"Unknown tool: {tool_name}", rpc_id)

    context = CallerContext.from_raw(body.get("context"))
    try:
        result = await send_email(params.get("arguments") or {}, context, client=client, sink=sink)
    except Exception as e:
        logger.error("Error handling tool request: %s", e)
        return _rpc_error(INTERNAL_ERROR, "Internal server error", rpc_id, status_code=500)

    payload = result.model_dump()
    return _rpc_result(rpc_id, {
        "content": [{"type": "text", "text": json.dumps(payload)}],
        "structuredContent": payload,
    })


@router.api_route("", methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"])
async def method_not_allowed() -> JSONResponse:
    return _rpc_error(
        METHOD_NOT_ALLOWED,
        "Method not allowed",
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
    )
