from .app import create_app, CONTAINER

__all__ = ['create_app', 'CONTAINER']
