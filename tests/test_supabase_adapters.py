"""
Supabase Adapter Tests
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from account_service.adapters.base import Document
from account_service.adapters.supabase_auth import SupabaseAuthProvider, to_auth_session
from account_service.adapters.supabase_store import SupabaseDocumentStore
from account_service.exceptions import AccountServiceError, ConfigurationError, PreconditionFailedError
from account_service.models import AuthSession


class TestSupabaseAuthProvider:
    def test_tracks_auth_state_events(self, mock_supabase_client, gotrue_user):
        provider = SupabaseAuthProvider(mock_supabase_client)
        state_callback = mock_supabase_client.subscriptions[0].callback

        state_callback("SIGNED_IN", SimpleNamespace(user=gotrue_user(uid="u9")))
        assert provider.current_session == AuthSession(uid="u9", is_anonymous=False, email="ada@example.com")

        state_callback("SIGNED_OUT", None)
        assert provider.current_session is None

    @pytest.mark.asyncio
    async def test_sign_in_with_password(self, mock_supabase_client):
        provider = SupabaseAuthProvider(mock_supabase_client)

        session = await provider.sign_in_with_password("ada@example.com", "pw")

        mock_supabase_client.auth.sign_in_with_password.assert_awaited_once_with({
            "email": "ada@example.com",
            "password": "pw"
        })
        assert session.uid == "uid-1"
        assert provider.current_session == session

    @pytest.mark.asyncio
    async def test_sign_in_error_propagates(self, mock_supabase_client):
        mock_supabase_client.auth.sign_in_with_password.side_effect = RuntimeError("Invalid login credentials")
        provider = SupabaseAuthProvider(mock_supabase_client)

        with pytest.raises(RuntimeError):
            await provider.sign_in_with_password("ada@example.com", "bad")
        assert provider.current_session is None

    @pytest.mark.asyncio
    async def test_sign_in_without_user(self, mock_supabase_client, auth_response):
        mock_supabase_client.auth.sign_in_with_password.return_value = auth_response(None)
        provider = SupabaseAuthProvider(mock_supabase_client)

        with pytest.raises(PreconditionFailedError):
            await provider.sign_in_with_password("ada@example.com", "pw")

    @pytest.mark.asyncio
    async def test_anonymous_sign_in_and_link(self, mock_supabase_client):
        provider = SupabaseAuthProvider(mock_supabase_client)

        anonymous = await provider.sign_in_anonymously()
        assert anonymous.is_anonymous is True

        linked = await provider.link_with_password("new@example.com", "pw")

        mock_supabase_client.auth.update_user.assert_awaited_once_with({
            "email": "new@example.com",
            "password": "pw"
        })
        assert linked.uid == "anon-1"
        assert linked.is_anonymous is False

    @pytest.mark.asyncio
    async def test_send_password_reset_email(self, mock_supabase_client):
        provider = SupabaseAuthProvider(mock_supabase_client)

        await provider.send_password_reset_email("ada@example.com")

        mock_supabase_client.auth.reset_password_for_email.assert_awaited_once_with("ada@example.com")

    def test_session_listener(self, mock_supabase_client, gotrue_user):
        provider = SupabaseAuthProvider(mock_supabase_client)
        seen = []

        remove = provider.add_session_listener(seen.append)
        subscription = mock_supabase_client.subscriptions[1]
        subscription.callback("SIGNED_IN", SimpleNamespace(user=gotrue_user(uid="u2", is_anonymous=True)))
        subscription.callback("SIGNED_OUT", None)
        remove()

        assert seen == [AuthSession(uid="u2", is_anonymous=True, email="ada@example.com"), None]
        subscription.unsubscribe.assert_called_once()

    @pytest.mark.asyncio
    async def test_sign_out(self, mock_supabase_client):
        provider = SupabaseAuthProvider(mock_supabase_client)
        await provider.sign_in_with_password("ada@example.com", "pw")

        await provider.sign_out()

        mock_supabase_client.auth.sign_out.assert_awaited_once()
        assert provider.current_session is None

    @pytest.mark.asyncio
    async def test_delete_user_requires_admin_client(self, mock_supabase_client):
        provider = SupabaseAuthProvider(mock_supabase_client)

        with pytest.raises(ConfigurationError):
            await provider.delete_user("uid-1")

    @pytest.mark.asyncio
    async def test_delete_current_user_ends_session(self, mock_supabase_client, mock_supabase_admin_client):
        provider = SupabaseAuthProvider(mock_supabase_client, mock_supabase_admin_client)
        await provider.sign_in_with_password("ada@example.com", "pw")

        await provider.delete_user("uid-1")

        mock_supabase_admin_client.auth.admin.delete_user.assert_awaited_once_with("uid-1")
        mock_supabase_client.auth.sign_out.assert_awaited_once()
        assert provider.current_session is None

    @pytest.mark.asyncio
    async def test_delete_other_user_keeps_session(self, mock_supabase_client, mock_supabase_admin_client):
        provider = SupabaseAuthProvider(mock_supabase_client, mock_supabase_admin_client)
        await provider.sign_in_with_password("ada@example.com", "pw")

        await provider.delete_user("someone-else")

        mock_supabase_client.auth.sign_out.assert_not_awaited()
        assert provider.current_session.uid == "uid-1"

    def test_close_stops_state_tracking(self, mock_supabase_client):
        provider = SupabaseAuthProvider(mock_supabase_client)
        provider.close()
        mock_supabase_client.subscriptions[0].unsubscribe.assert_called_once()

    def test_to_auth_session_defaults(self):
        assert to_auth_session(None) is None
        session = to_auth_session(SimpleNamespace(id=42, email=""))
        assert session == AuthSession(uid="42", is_anonymous=False, email=None)


class TestSupabaseDocumentStore:
    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.mark.asyncio
    async def test_query_by_field(self, client):
        table = client.table.return_value
        table.select.return_value.eq.return_value.execute = AsyncMock(
            return_value=SimpleNamespace(data=[{"id": 7, "userId": "u1", "login": "x"}])
        )
        store = SupabaseDocumentStore(client)

        documents = await store.query_by_field("users", "userId", "u1")

        client.table.assert_called_with("users")
        table.select.assert_called_once_with("*")
        table.select.return_value.eq.assert_called_once_with("userId", "u1")
        assert documents == [Document(id="7", data={"userId": "u1", "login": "x"})]

    @pytest.mark.asyncio
    async def test_query_without_rows(self, client):
        client.table.return_value.select.return_value.eq.return_value.execute = AsyncMock(
            return_value=SimpleNamespace(data=[])
        )
        assert await SupabaseDocumentStore(client).query_by_field("users", "userId", "u1") == []

    @pytest.mark.asyncio
    async def test_add_returns_generated_key(self, client):
        table = client.table.return_value
        table.insert.return_value.execute = AsyncMock(
            return_value=SimpleNamespace(data=[{"id": 12, "userId": "u1"}])
        )

        key = await SupabaseDocumentStore(client).add("users", {"userId": "u1"})

        table.insert.assert_called_once_with({"userId": "u1"})
        assert key == "12"

    @pytest.mark.asyncio
    async def test_add_without_returned_row(self, client):
        client.table.return_value.insert.return_value.execute = AsyncMock(
            return_value=SimpleNamespace(data=[])
        )
        with pytest.raises(AccountServiceError):
            await SupabaseDocumentStore(client).add("users", {"userId": "u1"})

    @pytest.mark.asyncio
    async def test_delete_by_key(self, client):
        table = client.table.return_value
        table.delete.return_value.eq.return_value.execute = AsyncMock()

        await SupabaseDocumentStore(client, key_column="doc_id").delete_by_key("users", "12")

        table.delete.return_value.eq.assert_called_once_with("doc_id", "12")
        table.delete.return_value.eq.return_value.execute.assert_awaited_once()
