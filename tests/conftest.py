import pytest

from argocd_gateway.models import FoundApp
from argocd_gateway.services.instances import Instance, InstanceDirectory


def pytest_configure(config):
    # Register markers used across the suite
    config.addinivalue_line("markers", "asyncio: mark test as async")


class FakeArgoCD:
    """Stands in for :class:`argocd_gateway.services.argocd.ArgoCD`.

    Each ``*_side_effects`` list is consumed in order; an exception entry is
    raised, anything else is returned. Once a list is empty the default answer
    is used.
    """

    def __init__(self):
        self.calls = {
            "login": 0,
            "find_app": 0,
            "get_app_data": 0,
            "create_project": 0,
            "create_application": 0,
            "delete_app": 0,
            "delete_project": 0,
            "resync": 0,
        }
        self.login_side_effects = []
        self.find_side_effects = []
        self.get_app_data_side_effects = []
        self.create_project_side_effects = []
        self.create_application_side_effects = []
        self.delete_app_side_effects = []
        self.delete_project_side_effects = []
        self.resync_side_effects = []
        self.tokens_seen = []
        self.refs_seen = []
        self.deleted_projects = []

    @staticmethod
    def _next(effects, default):
        if effects:
            effect = effects.pop(0)
            if isinstance(effect, Exception):
                raise effect
            return effect
        return default

    async def login(self, instance):
        self.calls["login"] += 1
        return self._next(self.login_side_effects, "tok1")

    async def find_app(self, ref):
        self.calls["find_app"] += 1
        self.refs_seen.append(ref)
        return self._next(self.find_side_effects, [])

    async def get_app_data(self, base_url, instance_name, ref, token):
        self.calls["get_app_data"] += 1
        self.tokens_seen.append(token)
        self.refs_seen.append(ref)
        # An empty payload is what ArgoCD answers for an app that is gone.
        return self._next(self.get_app_data_side_effects, {})

    async def create_project(self, base_url, token, project_name, namespace, source_repo):
        self.calls["create_project"] += 1
        return self._next(self.create_project_side_effects, {"metadata": {"name": project_name}})

    async def create_application(self, base_url, token, project_name, app_name, namespace, source_repo, source_path, label_value):
        self.calls["create_application"] += 1
        return self._next(self.create_application_side_effects, {"metadata": {"name": app_name}})

    async def delete_app(self, base_url, app_name, token):
        self.calls["delete_app"] += 1
        self.tokens_seen.append(token)
        return self._next(self.delete_app_side_effects, True)

    async def delete_project(self, base_url, project_name, token):
        self.calls["delete_project"] += 1
        self.deleted_projects.append(project_name)
        return self._next(self.delete_project_side_effects, None)

    async def resync_app_on_all_instances(self, selector):
        self.calls["resync"] += 1
        return self._next(self.resync_side_effects, [])


@pytest.fixture
def fake_argocd():
    return FakeArgoCD()


@pytest.fixture
def directory():
    return InstanceDirectory(
        [
            Instance(name="prod", base_url="https://argocd.prod.example.com"),
            Instance(name="staging", base_url="https://argocd.staging.example.com", token="tok2"),
        ]
    )


@pytest.fixture
def found_prod():
    return FoundApp(name="prod", url="https://argocd.prod.example.com", appName=["web"])


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def sleep(delay):
        sleeps.append(delay)
    return sleep
