"""
StreamHub API Client.

Thin httpx wrapper that keeps an access/refresh token pair and follows the
server's session contract:

- every protected request carries `Authorization: Bearer <access token>`
- a 401 triggers exactly one refresh followed by exactly one retry
- if the refresh or the retry fails, stored credentials are cleared and
  SessionExpiredError is raised so the caller can ask for a fresh login
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """Server answered with a non-401 error envelope."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SessionExpiredError(ApiClientError):
    """Refresh failed or the retried request was still unauthorized."""

    def __init__(self, message: str = "Session expired, please log in again") -> None:
        super().__init__(401, message)


class StreamHubClient:
    """
    Session-aware StreamHub API client.

    Usage:
        with StreamHubClient("http://localhost:8000") as client:
            client.login(username="alice", password="s3cret-pass")
            feed = client.get("/videos", params={"page": 1, "limit": 10})
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: Optional[httpx.Client] = None,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        api_prefix: str = "/api/v1",
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Server origin, ignored when `http` is given.
            http: Preconfigured httpx client (tests pass a TestClient or a
                  client over httpx.MockTransport).
            access_token: Previously issued access token.
            refresh_token: Previously issued refresh token.
            api_prefix: Router prefix the server mounts resources under.
            timeout: Request timeout in seconds.
        """
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_http = http is None
        self.api_prefix = api_prefix.rstrip("/")
        self.access_token = access_token
        self.refresh_token = refresh_token

    def __enter__(self) -> "StreamHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def clear_credentials(self) -> None:
        self.access_token = None
        self.refresh_token = None

    # =========================================================================
    # Transport
    # =========================================================================

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return self._http.request(method, self._url(path), headers=headers, **kwargs)

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiClientError(response.status_code, message or response.reason_phrase)
        return body.get("data") if isinstance(body, dict) else body

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Send a request and return the envelope's `data`.

        Raises:
            SessionExpiredError: 401 survived one refresh and one retry.
            ApiClientError: any other error status.
        """
        response = self._send(method, path, **kwargs)
        if response.status_code != 401:
            return self._unwrap(response)

        logger.info(f"Access token rejected on {method} {path}, refreshing session")
        if not self.refresh_session():
            self.clear_credentials()
            raise SessionExpiredError()

        response = self._send(method, path, **kwargs)
        if response.status_code == 401:
            logger.warning(f"Retry after refresh still unauthorized on {method} {path}")
            self.clear_credentials()
            raise SessionExpiredError()
        return self._unwrap(response)

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    # =========================================================================
    # Session
    # =========================================================================

    def _store_tokens(self, data: dict[str, Any]) -> None:
        self.access_token = data["accessToken"]
        self.refresh_token = data["refreshToken"]

    def login(
        self,
        password: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> dict[str, Any]:
        """Log in and keep the issued token pair. Returns the user profile."""
        response = self._http.post(
            self._url("/users/login"),
            json={"username": username, "email": email, "password": password},
        )
        data = self._unwrap(response)
        self._store_tokens(data)
        return data["user"]

    def refresh_session(self) -> bool:
        """
        Exchange the stored refresh token for a new pair.

        Returns:
            True if a new pair was stored, False if the server refused.
        """
        if not self.refresh_token:
            return False
        response = self._http.post(
            self._url("/users/refresh-token"),
            json={"refreshToken": self.refresh_token},
        )
        if response.status_code != 200:
            logger.info(f"Session refresh refused with status {response.status_code}")
            return False
        self._store_tokens(response.json()["data"])
        return True

    def logout(self) -> None:
        """Invalidate the server-side session and forget local tokens."""
        try:
            if self.access_token:
                self.post("/users/logout")
        finally:
            self.clear_credentials()
