import asyncio
import contextlib
import logging
from aiohttp import web
from .keys import CONTAINER
from .middlewares import auth_middleware, error_middleware
from .routes import auth, budgets, cashback, payments, splits

logger = logging.getLogger(__name__)

SESSION_PURGE_INTERVAL = 60 * 60  # seconds

async def _purge_sessions(app: web.Application):
    sessions = app[CONTAINER].sessions
    while True:
        await asyncio.sleep(SESSION_PURGE_INTERVAL)
        sessions.purge_expired()

async def session_janitor(app: web.Application):
    task = asyncio.create_task(_purge_sessions(app))
    yield
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task

def create_app(container) -> web.Application:
    app = web.Application(middlewares=[error_middleware, auth_middleware])
    app[CONTAINER] = container

    for module in (auth, payments, splits, cashback, budgets):
        app.add_routes(module.routes)

    app.cleanup_ctx.append(session_janitor)
    return app
