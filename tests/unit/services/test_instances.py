import pytest

from argocd_gateway.errors import InstanceNotFoundError
from argocd_gateway.services.instances import Instance, InstanceDirectory
from argocd_gateway.utils.config import Config


def make_config(**kwargs):
    return Config(ARGOCD_CONFIG_FILE=None, **kwargs)


def test_from_config_keeps_order_and_ignores_other_locators():
    config = make_config(
        ARGOCD_APP_LOCATOR_METHODS=[
            {
                "type": "config",
                "instances": [
                    {"name": "prod", "url": "https://argocd.prod.example.com/"},
                    {"name": "dev", "url": "https://argocd.dev.example.com", "token": "t"},
                ],
            },
            {"type": "cluster", "instances": [{"name": "ignored", "url": "https://x"}]},
            {"type": "config", "instances": [{"name": "qa", "url": "https://argocd.qa.example.com"}]},
        ]
    )

    directory = InstanceDirectory.from_config(config)

    assert directory.names() == ("prod", "dev", "qa")
    assert directory.resolve("prod").base_url == "https://argocd.prod.example.com"
    assert directory.resolve("dev").token == "t"


def test_resolve_is_exact_and_case_sensitive(directory):
    assert directory.resolve("prod").name == "prod"

    for name in ("PROD", "pro", "prod "):
        with pytest.raises(InstanceNotFoundError) as ei:
            directory.resolve(name)
        assert ei.value.instance_name == name


def test_duplicate_names_are_rejected():
    with pytest.raises(ValueError):
        InstanceDirectory([Instance(name="prod", base_url="https://a"), Instance(name="prod", base_url="https://b")])


def test_empty_directory():
    directory = InstanceDirectory.from_config(make_config())

    assert len(directory) == 0
    with pytest.raises(InstanceNotFoundError):
        directory.resolve("prod")
