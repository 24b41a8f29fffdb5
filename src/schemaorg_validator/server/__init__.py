from .server import ValidationServer

__all__ = ['ValidationServer']
