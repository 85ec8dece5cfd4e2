from .exception import handlers

__all__ = ["handlers"]
