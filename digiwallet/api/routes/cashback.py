from aiohttp import web
from ..keys import CONTAINER
from ..middlewares import service_response

routes = web.RouteTableDef()

@routes.get("/cashback/campaigns")
async def campaigns(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].cashback_service.get_active_campaigns()
    return service_response(result)
