from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from ..errors import AuthenticationError, ExternalServiceError
from .instances import Instance, InstanceDirectory


class LoginClient(Protocol):
    async def login(self, instance: Instance) -> str: ...


@dataclass(frozen=True)
class Connection:
    instance: Instance
    token: str


class TokenResolver:
    """Hand out a bearer token for an instance.

    A static token from configuration is returned as is. Otherwise a session
    is opened on every call; tokens are never cached between requests.
    """

    def __init__(self, client: LoginClient):
        self.client = client

    async def resolve_token(self, instance: Instance) -> str:
        if instance.token:
            return instance.token

        logger.bind(instance=instance.name).debug("No static token, logging in")
        try:
            return await self.client.login(instance)
        except ExternalServiceError as e:
            logger.bind(instance=instance.name).error(f"ArgoCD login failed: {e.detail} ({e.status_code})")
            raise AuthenticationError.from_upstream(e) from e

    async def connect(self, directory: InstanceDirectory, instance_name: str) -> Connection:
        """Resolve ``instance_name`` and a token for it, or raise before any ArgoCD call."""

        instance = directory.resolve(instance_name)
        return Connection(instance=instance, token=await self.resolve_token(instance))
