from typing import Optional


class ExternalServiceError(Exception):
    def __init__(self, service_name: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        # Error raised when a remote system answers with a failure
        self.service_name = service_name
        self.error = f"Request to {service_name} failed."
        self.status_code = status_code
        self.detail = detail
        super().__init__(detail or self.error)


class ArgoCDError(ExternalServiceError):
    def __init__(self, status_code: Optional[int], detail: Optional[str]):
        super().__init__(service_name="ArgoCD", status_code=status_code, detail=detail)


class ArgoCDConnectionError(ArgoCDError):
    """ArgoCD could not be reached at all (DNS, TLS, timeout, refused)."""

    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)
