"""Settings shared by every FastAPI service built on :mod:`argocd_gateway.general`."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BasicSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    HOST: str = Field(default="0.0.0.0", description="Interface uvicorn binds to.")

    PORT: int = Field(default=8080, description="Port uvicorn listens on.")

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Minimum level emitted by the application logger.",
        examples=["DEBUG", "INFO", "WARNING"],
    )

    LOG_RESOURCE: str = Field(
        default="argocd-gateway",
        description="Resource name that prefixes every log line.",
    )

    LOG_REQUEST_EXCLUDE_PATHS: list[str] = Field(
        default=["/health", "/metrics"],
        description="Path prefixes whose requests are logged at DEBUG instead of INFO.",
    )

    PROCESS_TIME_HEADER: str = Field(
        default="X-Process-Time",
        description="Response header carrying the request processing time in nanoseconds.",
    )

    PROBE_LIVENESS_PATH: str = Field(default="/health/live")

    PROBE_READINESS_PATH: str = Field(default="/health/ready")

    METRICS_PATH: str = Field(default="/metrics")

    OPENAPI_VERSION: str = Field(default="1.0.0")
