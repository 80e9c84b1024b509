import logging
from functools import wraps
from typing import Any, Dict, Type, TypeVar
from aiohttp import web
from pydantic import ValidationError
from ..utils.formatters import json_dumps
from .keys import CONTAINER
from .schemas import RequestBody

logger = logging.getLogger(__name__)

Body = TypeVar("Body", bound=RequestBody)

class RequestError(Exception):
    """Malformed request; answered with HTTP 400"""

def json_result(result: Dict[str, Any], status: int = 200) -> web.Response:
    return web.json_response(result, status=status, dumps=json_dumps)

def service_response(result: Dict[str, Any], fail_status: int = 400) -> web.Response:
    """Map a service result dict onto an HTTP status"""
    return json_result(result, status=200 if result.get("success") else fail_status)

async def read_body(request: web.Request, model: Type[Body]) -> Body:
    try:
        payload = await request.json()
    except ValueError:
        raise RequestError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise RequestError("Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except ValidationError:
        raise RequestError(model.error_message)

def parse_bearer(header: str) -> str:
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()

@web.middleware
async def error_middleware(request: web.Request, handler):
    try:
        return await handler(request)
    except RequestError as e:
        return json_result({"success": False, "message": str(e)}, status=400)
    except web.HTTPNotFound:
        return json_result({"success": False, "message": "Not found"}, status=404)
    except web.HTTPMethodNotAllowed:
        return json_result({"success": False, "message": "Method not allowed"}, status=405)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return json_result({"success": False, "message": "Internal server error"}, status=500)

@web.middleware
async def auth_middleware(request: web.Request, handler):
    """Resolve the caller from ``Authorization: Bearer <token>``.

    A token naming a live session maps to that session's user; any other
    token is taken as the user id itself.
    """
    request["user_id"] = None
    request["session_id"] = None

    token = parse_bearer(request.headers.get("Authorization", ""))
    if token:
        session = request.app[CONTAINER].sessions.get(token)
        if session:
            request["user_id"] = session.user_id
            request["session_id"] = session.session_id
        else:
            request["user_id"] = token

    return await handler(request)

def login_required(handler):
    @wraps(handler)
    async def wrapper(request: web.Request):
        if not request.get("user_id"):
            return json_result({"success": False, "message": "You need to log in"}, status=401)
        return await handler(request)
    return wrapper
