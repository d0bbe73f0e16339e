"""
Unit tests for the StreamHub API client (clients/streamhub_client.py).

Tests cover:
- Bearer header on every request
- Exactly one refresh and one retry on 401
- Credential clearing on a failed refresh or retry
- Error envelopes mapped to ApiClientError
- End to end against the app via TestClient
"""

import httpx
import pytest

from clients import ApiClientError, SessionExpiredError, StreamHubClient

from conftest import API, PASSWORD


def envelope(status_code, data=None, message="Success"):
    return httpx.Response(
        status_code,
        json={"statusCode": status_code, "data": data, "message": message,
              "success": status_code < 400},
    )


class FakeServer:
    """Scripted responses for protected calls plus a refresh endpoint."""

    def __init__(self, protected, refresh_ok=True):
        self.protected = list(protected)
        self.refresh_ok = refresh_ok
        self.calls = []

    def __call__(self, request):
        self.calls.append((request.url.path, request.headers.get("authorization")))
        if request.url.path.endswith("/users/refresh-token"):
            if not self.refresh_ok:
                return envelope(401, message="Refresh token is expired or used")
            return envelope(200, {"accessToken": "access-2", "refreshToken": "refresh-2"})
        return self.protected.pop(0)

    @property
    def refresh_calls(self):
        return [c for c in self.calls if c[0].endswith("/users/refresh-token")]


def make_client(server, **tokens):
    http = httpx.Client(transport=httpx.MockTransport(server), base_url="http://api.test")
    return StreamHubClient(
        http=http,
        access_token=tokens.get("access", "access-1"),
        refresh_token=tokens.get("refresh", "refresh-1"),
    )


class TestRetryContract:
    """Tests for the refresh-once-then-retry rule."""

    def test_success_needs_no_refresh(self):
        server = FakeServer([envelope(200, {"ok": True})])
        client = make_client(server)

        assert client.get("/users/current-user") == {"ok": True}
        assert server.calls == [(f"{API}/users/current-user", "Bearer access-1")]

    def test_401_refreshes_once_and_retries_with_new_token(self):
        server = FakeServer([envelope(401, message="expired"), envelope(200, {"ok": True})])
        client = make_client(server)

        assert client.get("/users/current-user") == {"ok": True}
        assert len(server.refresh_calls) == 1
        assert server.calls[-1] == (f"{API}/users/current-user", "Bearer access-2")
        assert client.refresh_token == "refresh-2"

    def test_failed_refresh_clears_credentials(self):
        server = FakeServer([envelope(401, message="expired")], refresh_ok=False)
        client = make_client(server)

        with pytest.raises(SessionExpiredError):
            client.get("/users/current-user")
        assert client.access_token is None
        assert client.refresh_token is None

    def test_second_401_does_not_loop(self):
        server = FakeServer([envelope(401), envelope(401), envelope(200, {})])
        client = make_client(server)

        with pytest.raises(SessionExpiredError):
            client.get("/users/current-user")
        assert len(server.refresh_calls) == 1
        assert not client.is_authenticated

    def test_no_refresh_token_means_expired(self):
        server = FakeServer([envelope(401)])
        client = make_client(server, refresh=None)

        with pytest.raises(SessionExpiredError):
            client.get("/users/current-user")
        assert server.refresh_calls == []

    def test_other_errors_raise_api_client_error(self):
        server = FakeServer([envelope(403, message="You are not allowed to perform this action")])
        client = make_client(server)

        with pytest.raises(ApiClientError) as exc_info:
            client.delete("/videos/abc")
        assert exc_info.value.status_code == 403
        assert not isinstance(exc_info.value, SessionExpiredError)
        assert server.refresh_calls == []


class TestAgainstApp:
    """Client driving the real app through TestClient."""

    def test_login_and_rotated_refresh(self, client, make_user):
        make_user("alice")
        api = StreamHubClient(http=client)

        user = api.login(PASSWORD, username="alice")
        assert user["username"] == "alice"
        first_refresh = api.refresh_token

        assert api.refresh_session()
        assert api.refresh_token != first_refresh
        assert api.get("/users/current-user")["user"]["username"] == "alice"

    def test_stale_access_token_is_recovered(self, client, make_user):
        alice = make_user("alice")
        api = StreamHubClient(http=client, access_token="garbage", refresh_token=alice.refresh_token)

        assert api.get("/users/current-user")["user"]["username"] == "alice"
        assert api.access_token != "garbage"

    def test_logout_forgets_tokens(self, client, make_user):
        alice = make_user("alice")
        api = StreamHubClient(http=client, access_token=alice.access_token,
                              refresh_token=alice.refresh_token)

        api.logout()
        assert not api.is_authenticated
