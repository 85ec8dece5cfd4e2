from .argocd import ArgoCDAPI, application_definition, handle_response, project_definition

__all__ = ["ArgoCDAPI", "application_definition", "handle_response", "project_definition"]
