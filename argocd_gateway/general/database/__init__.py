from .basic_api import BaseAPI

__all__ = ["BaseAPI"]
