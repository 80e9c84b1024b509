import logging
from aiohttp import web
from ..keys import CONTAINER
from ..middlewares import json_result, login_required, read_body
from ..schemas import LoginRequest

logger = logging.getLogger(__name__)

routes = web.RouteTableDef()

@routes.post("/auth/login")
async def login(request: web.Request) -> web.Response:
    body = await read_body(request, LoginRequest)
    container = request.app[CONTAINER]
    result = await container.user_service.authenticate_by_id(body.user_id)
    if not result["success"]:
        return json_result(result, status=401)

    token = container.sessions.create(body.user_id)
    result["data"]["token"] = token
    logger.info(f"User {body.user_id} logged in")
    return json_result(result)

@routes.post("/auth/logout")
async def logout(request: web.Request) -> web.Response:
    if request["session_id"]:
        request.app[CONTAINER].sessions.destroy(request["session_id"])
    return json_result({"success": True, "message": "Logged out"})

@routes.get("/auth/profile")
@login_required
async def profile(request: web.Request) -> web.Response:
    user = await request.app[CONTAINER].user_service.get_user_profile(request["user_id"])
    if not user:
        return json_result({"success": False, "message": "User not found"}, status=404)
    return json_result({"success": True, "data": {"user": user}})

@routes.get("/auth/users/search")
@login_required
async def search_users(request: web.Request) -> web.Response:
    term = request.query.get("q") or request.query.get("query")
    users = await request.app[CONTAINER].user_service.search_users(request["user_id"], term)
    return json_result({"success": True, "data": {"users": users}})

@routes.get("/auth/contacts")
@login_required
async def contacts(request: web.Request) -> web.Response:
    items = await request.app[CONTAINER].user_service.get_contacts(request["user_id"])
    return json_result({"success": True, "data": {"contacts": items}})
