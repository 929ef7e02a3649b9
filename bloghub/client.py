"""
Async HTTP client for the Bloghub API with an explicit client session.

The session is a plain object owned by the caller and passed to the client;
there is no module-level state. Its lifecycle is

    anonymous -> authenticated(identity, token, expires_at) -> anonymous

where the return to anonymous happens on logout() or once expires_at passes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import httpx

from bloghub.core.roles import Role, is_admin

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0


class BlogClientError(Exception):
    """Raised when the API returns a non-2xx response or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class SessionIdentity:
    id: int
    username: str
    email: str
    role: Role | None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> SessionIdentity:
        return cls(
            id=int(data["id"]),
            username=str(data.get("username", "")),
            email=str(data.get("email", "")),
            role=Role.parse(data.get("role")),
        )


@dataclass
class ClientSession:
    """Logged-in identity and token for one client; anonymous when identity is None."""

    identity: SessionIdentity | None = None
    token: str | None = None
    expires_at: datetime | None = None
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(UTC), repr=False)

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.clock() >= self.expires_at

    @property
    def is_authenticated(self) -> bool:
        if self.identity is None or not self.token:
            return False
        if self.is_expired:
            self.logout()
            return False
        return True

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and is_admin(self.identity)

    def login(self, identity: SessionIdentity, token: str, expires_at: datetime) -> None:
        self.identity = identity
        self.token = token
        self.expires_at = expires_at

    def logout(self) -> None:
        self.identity = None
        self.token = None
        self.expires_at = None

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the current token, or {} when anonymous."""
        if not self.is_authenticated:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


def _parse_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _error_message(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    if isinstance(detail, str) and detail:
        return detail
    if detail:
        return str(detail)
    return f"Request failed: {response.status_code} {response.reason_phrase}"


class BlogClient:
    """
    Thin async wrapper over the REST API.

    Pass base_url including the API prefix (e.g. http://localhost:8000/api).
    transport is forwarded to httpx (tests use httpx.ASGITransport).
    """

    def __init__(
        self,
        base_url: str,
        session: ClientSession | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self.session = session if session is not None else ClientSession()
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            transport=transport,
            timeout=timeout,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> BlogClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = False,
        **kwargs: Any,
    ) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if auth:
            headers.update(self.session.auth_headers())
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise BlogClientError(f"API unreachable: {e!s}") from e
        if response.status_code >= 400:
            raise BlogClientError(_error_message(response), status_code=response.status_code)
        return response.json()

    def _start_session(self, data: dict[str, Any]) -> SessionIdentity:
        identity = SessionIdentity.from_payload(data["user"])
        self.session.login(identity, data["token"], _parse_datetime(data["expires_at"]))
        logger.debug("Client session started", extra={"user_id": identity.id})
        return identity

    async def register(self, username: str, email: str, password: str) -> SessionIdentity:
        """Register and log in with the same credentials."""
        await self._request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        return await self.login(email, password)

    async def login(self, email: str, password: str) -> SessionIdentity:
        data = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        return self._start_session(data)

    def logout(self) -> None:
        self.session.logout()

    async def get_profile(self) -> dict[str, Any]:
        return await self._request("GET", "/users/profile", auth=True)

    async def list_users(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/users", auth=True)
        return data["users"]

    async def list_posts(
        self, page: int = 1, limit: int = 10, category: int | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if category is not None:
            params["category"] = category
        return await self._request("GET", "/posts", params=params)

    async def get_post(self, post_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/posts/{post_id}")

    async def create_post(self, **fields: Any) -> dict[str, Any]:
        return await self._request("POST", "/posts", auth=True, json=fields)

    async def update_post(self, post_id: int, **fields: Any) -> dict[str, Any]:
        return await self._request("PUT", f"/posts/{post_id}", auth=True, json=fields)

    async def delete_post(self, post_id: int) -> dict[str, Any]:
        return await self._request("DELETE", f"/posts/{post_id}", auth=True)

    async def add_comment(self, post_id: int, content: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"/posts/{post_id}/comments", auth=True, json={"content": content}
        )

    async def list_categories(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/categories")
        return data["categories"]

    async def create_category(self, name: str) -> dict[str, Any]:
        return await self._request("POST", "/categories", auth=True, json={"name": name})
