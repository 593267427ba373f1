"""Tests for caller identity resolution."""

import pytest
from botocore.exceptions import ClientError

from src.core.errors import IdentityLookupError
from src.services.auth_service import AuthService, Caller
from tests.unit.mocks import InMemoryCognitoClient


def _authorizer(username: str = "alice", scope: str | None = None) -> dict:
    claims = {"iss": "https://cognito-idp.us-east-1.amazonaws.com/us-east-1_Pool1", "username": username}
    if scope is not None:
        claims["scope"] = scope
    return {"claims": claims}


@pytest.mark.unit
class TestGetUserEmail:
    """Email lookup against the user pool."""

    @pytest.mark.asyncio
    async def test_resolves_email_from_pool_in_issuer(self, auth_service, cognito_client):
        email = await auth_service.get_user_email(_authorizer())

        assert email == "alice@example.com"
        assert cognito_client.calls == [{"UserPoolId": "us-east-1_Pool1", "Username": "alice"}]

    @pytest.mark.asyncio
    async def test_missing_claims_raises(self, auth_service):
        with pytest.raises(IdentityLookupError):
            await auth_service.get_user_email({})

    @pytest.mark.asyncio
    async def test_missing_context_raises(self, auth_service):
        with pytest.raises(IdentityLookupError):
            await auth_service.get_user_email(None)

    @pytest.mark.asyncio
    async def test_issuer_without_pool_raises(self, auth_service, cognito_client):
        with pytest.raises(IdentityLookupError):
            await auth_service.get_user_email({"claims": {"iss": "https://example.com", "username": "alice"}})

        assert cognito_client.calls == []

    @pytest.mark.asyncio
    async def test_user_without_email_attribute_raises(self):
        service = AuthService(InMemoryCognitoClient({("us-east-1_Pool1", "alice"): {"name": "Alice"}}))

        with pytest.raises(IdentityLookupError, match="Email not found"):
            await service.get_user_email(_authorizer())

    @pytest.mark.asyncio
    async def test_unknown_user_propagates_client_error(self, auth_service):
        with pytest.raises(ClientError):
            await auth_service.get_user_email(_authorizer(username="mallory"))


@pytest.mark.unit
class TestAdminScope:
    """Admin detection from the token scope."""

    def test_admin_scope(self, auth_service):
        assert auth_service.is_admin(_authorizer(scope="admin/tasks.write"))

    def test_regular_scope(self, auth_service):
        assert not auth_service.is_admin(_authorizer(scope="aws.cognito.signin.user.admin"))

    def test_no_scope(self, auth_service):
        assert not auth_service.is_admin(_authorizer())

    def test_null_claims_is_not_admin(self, auth_service):
        assert not auth_service.is_admin({"claims": None})

    def test_non_string_scope_is_not_admin(self, auth_service):
        assert not auth_service.is_admin({"claims": {"scope": ["admin"]}})

    @pytest.mark.asyncio
    async def test_resolve_caller(self, auth_service):
        caller = await auth_service.resolve_caller(_authorizer(scope="admin"))

        assert caller == Caller(email="alice@example.com", is_admin=True)


@pytest.mark.unit
class TestCaller:
    """Access rule for owner-scoped operations."""

    def test_owner_can_access_own_tasks(self, alice_caller):
        assert alice_caller.can_access("alice@example.com")

    def test_owner_cannot_access_other_tasks(self, alice_caller):
        assert not alice_caller.can_access("bob@example.com")

    def test_admin_can_access_any_tasks(self, admin_caller):
        assert admin_caller.can_access("bob@example.com")
