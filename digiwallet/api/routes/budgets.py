from aiohttp import web
from ..keys import CONTAINER
from ..middlewares import login_required, read_body, service_response
from ..schemas import BudgetRequest

routes = web.RouteTableDef()

@routes.get("/budgets")
@login_required
async def list_budgets(request: web.Request) -> web.Response:
    budget_service = request.app[CONTAINER].budget_service
    month = request.query.get("month") or budget_service.current_month()
    result = await budget_service.get_user_budgets(request["user_id"], month)
    return service_response(result)

@routes.get("/budgets/summary")
@login_required
async def summary(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].budget_service.get_budget_summary(request["user_id"])
    return service_response(result)

@routes.get("/budgets/months")
@login_required
async def months(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].budget_service.get_user_budget_months(request["user_id"])
    return service_response(result)

@routes.post("/budgets")
@login_required
async def set_budget(request: web.Request) -> web.Response:
    body = await read_body(request, BudgetRequest)
    result = await request.app[CONTAINER].budget_service.set_budget(
        request["user_id"], body.month, body.category, body.limit_amount
    )
    return service_response(result)

@routes.delete("/budgets/{month}/{category}")
@login_required
async def delete_budget(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].budget_service.delete_budget(
        request["user_id"], request.match_info["month"], request.match_info["category"]
    )
    return service_response(result, fail_status=404)
