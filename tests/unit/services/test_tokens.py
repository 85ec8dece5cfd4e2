import pytest

from argocd_gateway.errors import ArgoCDError, AuthenticationError, InstanceNotFoundError
from argocd_gateway.services.instances import Instance
from argocd_gateway.services.tokens import TokenResolver


@pytest.mark.asyncio
async def test_static_token_is_returned_without_login(fake_argocd):
    resolver = TokenResolver(fake_argocd)

    token = await resolver.resolve_token(Instance(name="staging", base_url="https://a", token="tok2"))

    assert token == "tok2"
    assert fake_argocd.calls["login"] == 0


@pytest.mark.asyncio
async def test_missing_token_logs_in_every_time(fake_argocd):
    fake_argocd.login_side_effects = ["tok1", "tok3"]
    resolver = TokenResolver(fake_argocd)
    instance = Instance(name="prod", base_url="https://a")

    assert await resolver.resolve_token(instance) == "tok1"
    assert await resolver.resolve_token(instance) == "tok3"
    assert fake_argocd.calls["login"] == 2


@pytest.mark.asyncio
async def test_login_failure_keeps_upstream_status_and_message(fake_argocd):
    fake_argocd.login_side_effects = [ArgoCDError(status_code=401, detail="Invalid username or password")]
    resolver = TokenResolver(fake_argocd)

    with pytest.raises(AuthenticationError) as ei:
        await resolver.resolve_token(Instance(name="prod", base_url="https://a"))

    assert ei.value.status == 401
    assert ei.value.to_response() == {"status": 401, "message": "Invalid username or password"}


@pytest.mark.asyncio
async def test_connect_resolves_instance_and_token(directory, fake_argocd):
    conn = await TokenResolver(fake_argocd).connect(directory, "prod")

    assert conn.instance.name == "prod"
    assert conn.token == "tok1"


@pytest.mark.asyncio
async def test_connect_to_unknown_instance_never_logs_in(directory, fake_argocd):
    with pytest.raises(InstanceNotFoundError) as ei:
        await TokenResolver(fake_argocd).connect(directory, "qa")

    assert fake_argocd.calls["login"] == 0
    assert ei.value.to_response() == {
        "status": "failed",
        "message": "cannot find an argo instance to match this cluster",
    }
