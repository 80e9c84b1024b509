from aiohttp import web
from ..keys import CONTAINER
from ..middlewares import json_result, login_required, read_body, service_response
from ..schemas import EqualSplitRequest, WeightedSplitRequest

routes = web.RouteTableDef()

@routes.post("/splits/equal")
@login_required
async def create_equal(request: web.Request) -> web.Response:
    body = await read_body(request, EqualSplitRequest)
    result = await request.app[CONTAINER].bill_split_service.create_equal_split(
        request["user_id"], body.original_tx_id, body.debtor_user_ids
    )
    return service_response(result)

@routes.post("/splits/weighted")
@login_required
async def create_weighted(request: web.Request) -> web.Response:
    body = await read_body(request, WeightedSplitRequest)
    result = await request.app[CONTAINER].bill_split_service.create_weighted_split(
        request["user_id"], body.original_tx_id,
        [item.model_dump() for item in body.debtor_weights]
    )
    return service_response(result)

@routes.get("/splits/summary")
@login_required
async def summary(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].bill_split_service.get_user_split_summary(request["user_id"])
    return service_response(result)

@routes.get("/splits")
@login_required
async def list_splits(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].bill_split_service.get_user_splits(
        request["user_id"],
        status=request.query.get("status"),
        role=request.query.get("role")
    )
    return service_response(result)

@routes.get(r"/splits/{split_id:\d+}")
@login_required
async def details(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].bill_split_service.get_split_details(
        int(request.match_info["split_id"])
    )
    if not result["success"]:
        return service_response(result, fail_status=404)

    split = result["data"]
    if request["user_id"] not in (split["payer_user_id"], split["debtor_user_id"]):
        return json_result(
            {"success": False, "message": "You are not allowed to view this bill split"},
            status=403
        )
    return service_response(result)

@routes.post(r"/splits/{split_id:\d+}/settle")
@login_required
async def settle(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].bill_split_service.settle_bill_split(
        int(request.match_info["split_id"]), request["user_id"]
    )
    return service_response(result)

@routes.delete(r"/splits/{split_id:\d+}")
@login_required
async def cancel(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].bill_split_service.cancel_bill_split(
        int(request.match_info["split_id"]), request["user_id"]
    )
    return service_response(result)
