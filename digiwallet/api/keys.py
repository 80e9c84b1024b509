from aiohttp import web
from ..container import Container

CONTAINER = web.AppKey("container", Container)
