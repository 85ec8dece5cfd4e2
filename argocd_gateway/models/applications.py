from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class ApplicationRef(BaseModel):
    """Identifies applications either by exact name or by label selector."""

    name: Optional[str] = None
    selector: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one(self):
        if (self.name is None) == (self.selector is None):
            raise ValueError("exactly one of 'name' or 'selector' must be set")
        return self

    def describe(self) -> str:
        return f"name={self.name}" if self.name is not None else f"selector={self.selector}"


class FoundApp(BaseModel):
    name: str = Field(description="Name of the ArgoCD instance the apps were found on.")
    url: str
    appName: List[str]


class CreateArgoRequest(BaseModel):
    clusterName: str = Field(description="Name of the ArgoCD instance to create on.")
    namespace: str
    projectName: str
    appName: str
    labelValue: str
    sourceRepo: str
    sourcePath: str


class CreateArgoResponse(BaseModel):
    argoProjectName: str
    argoAppName: str
    kubernetesNamespace: str


class SyncRequest(BaseModel):
    appSelector: str


class SyncResponse(BaseModel):
    status: Literal["Success", "Failure"]
    message: str
