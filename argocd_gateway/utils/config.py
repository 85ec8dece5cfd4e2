from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import SettingsConfigDict

from ..general.utils.config import BasicSettings


class InstanceConfig(BaseModel):
    name: str
    url: str
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class AppLocatorMethod(BaseModel):
    type: str
    instances: List[InstanceConfig] = []


# Keys of the ``argocd:`` section of a Backstage app-config, mapped to settings.
_CONFIG_FILE_KEYS = {
    "username": "ARGOCD_USERNAME",
    "password": "ARGOCD_PASSWORD",
    "waitCycles": "ARGOCD_WAIT_CYCLES",
    "appLocatorMethods": "ARGOCD_APP_LOCATOR_METHODS",
}


def read_config_file(path: str) -> Dict[str, Any]:
    """Return the ``argocd`` section of a YAML app-config, or ``{}``."""

    with open(path, encoding="utf-8") as stream:
        document = yaml.safe_load(stream) or {}

    section = document.get("argocd") or {}
    if not isinstance(section, dict):
        raise ValueError(f"'argocd' section of {path!r} must be a mapping")
    return section


class Config(BasicSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ROUTER_PREFIX: str = Field(
        default="/api/argocd",
        description="Mount point of the gateway routes.",
        examples=["/api/argocd", ""],
    )

    ARGOCD_USERNAME: str = Field(
        default="argocdUsername",
        description="Username used to log in to instances that have no static token.",
    )

    ARGOCD_PASSWORD: str = Field(
        default="argocdPassword",
        description="Password used to log in to instances that have no static token.",
    )

    ARGOCD_WAIT_CYCLES: int = Field(
        default=5,
        ge=0,
        description="How many times an application is polled after deletion before it is reported as pending delete.",
        examples=[5, 10],
    )

    ARGOCD_POLL_DELAY: float = Field(
        default=5.0,
        ge=0,
        description="Seconds to wait between two deletion polls.",
    )

    ARGOCD_REQUEST_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout in seconds of a single ArgoCD request.",
    )

    ARGOCD_VERIFY_SSL: bool = Field(
        default=False,
        description="Verify the TLS certificates presented by ArgoCD instances.",
    )

    ARGOCD_APP_LOCATOR_METHODS: List[AppLocatorMethod] = Field(
        default=[],
        description="Instance locator methods. Only methods of type 'config' are used.",
        examples=[[{"type": "config", "instances": [{"name": "prod", "url": "https://argocd.prod.example.com"}]}]],
    )

    ARGOCD_CONFIG_FILE: Optional[str] = Field(
        default=None,
        description="Backstage app-config YAML whose 'argocd' section fills settings not set in the environment.",
        examples=["app-config.yaml"],
    )

    def model_post_init(self, __context):
        if not self.ARGOCD_CONFIG_FILE:
            return

        section = read_config_file(self.ARGOCD_CONFIG_FILE)
        for key, setting in _CONFIG_FILE_KEYS.items():
            if key not in section or setting in self.model_fields_set:
                continue
            value = section[key]
            if setting == "ARGOCD_APP_LOCATOR_METHODS":
                value = [AppLocatorMethod.model_validate(method) for method in value]
            elif setting == "ARGOCD_WAIT_CYCLES":
                value = int(value)
            object.__setattr__(self, setting, value)

    def instance_configs(self) -> List[InstanceConfig]:
        """Instances of every 'config' locator method, in declaration order."""

        return [
            instance
            for method in self.ARGOCD_APP_LOCATOR_METHODS
            if method.type == "config"
            for instance in method.instances
        ]
