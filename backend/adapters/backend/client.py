"""
Hosted backend adapter.

Wraps the backend's PostgREST-style REST interface (tables and named remote
procedures) and its auth endpoints behind a single async httpx client.
Every failure surfaces as a BackendError subclass.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


# Custom Exceptions
class BackendError(Exception):
    """Base exception for backend adapter errors."""

    pass


class BackendAuthError(BackendError):
    """Raised when there is no session or the backend rejects the credentials."""

    pass


class BackendAPIError(BackendError):
    """Raised when the backend answers with an error response."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class BackendConnectionError(BackendError):
    """Raised when the backend cannot be reached."""

    pass


# Filter helpers producing PostgREST conditions
def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def eq(value: Any) -> str:
    return f"eq.{_format_value(value)}"


def in_(values: Iterable[Any]) -> str:
    return "in.(" + ",".join(_format_value(v) for v in values) + ")"


def gte(value: Any) -> str:
    return f"gte.{_format_value(value)}"


def lte(value: Any) -> str:
    return f"lte.{_format_value(value)}"


Filters = Mapping[str, str | list[str]]


def build_query_params(
    filters: Filters | None = None,
    columns: str | None = None,
    order: str | None = None,
    ascending: bool = True,
    limit: int | None = None,
) -> list[tuple[str, str]]:
    """
    Build the query string for a table request.

    Args:
        filters: Column name to condition (``eq(...)``, ``in_(...)`` ...).
            A list applies several conditions to the same column.
        columns: Select clause
        order: Column to order by
        ascending: Sort direction for ``order``
        limit: Maximum number of rows

    Returns:
        List of query parameter pairs (repeated keys allowed)
    """
    params: list[tuple[str, str]] = []
    if columns:
        params.append(("select", columns))
    for column, condition in (filters or {}).items():
        if isinstance(condition, list):
            params.extend((column, c) for c in condition)
        else:
            params.append((column, condition))
    if order:
        params.append(("order", f"{order}.{'asc' if ascending else 'desc'}"))
    if limit is not None:
        params.append(("limit", str(limit)))
    return params


class BackendClient:
    """
    Async client for the hosted backend.

    Authenticates with the project's anon key and, once signed in, the
    user's access token. Table and RPC calls go through the REST API;
    sign-in, sign-up and password recovery go through the auth API.
    """

    REST_PATH = "/rest/v1"
    AUTH_PATH = "/auth/v1"

    def __init__(
        self,
        base_url: str | None = None,
        anon_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize backend client.

        Args:
            base_url: Backend project URL (defaults to settings)
            anon_key: Public anon key (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.backend_anon_key
        self.timeout = timeout or settings.backend_timeout
        self.access_token: str | None = None
        self.refresh_token: str | None = None
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not self.anon_key:
            logger.warning("Backend anon key not configured. Set backend_anon_key in settings.")

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _error_message(response: httpx.Response) -> tuple[str, str | None]:
        """Pull a human-readable message and error code out of an error body."""
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}", None

        if not isinstance(data, dict):
            return str(data), None

        message = (
            data.get("message")
            or data.get("msg")
            or data.get("error_description")
            or data.get("error")
            or f"HTTP {response.status_code}"
        )
        code = data.get("code") or data.get("error_code")
        return str(message), str(code) if code is not None else None

    async def _request(
        self,
        method: str,
        path: str,
        params: list[tuple[str, str]] | Mapping[str, str] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Make an HTTP request to the backend.

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            BackendAuthError: On 401/403
            BackendAPIError: On any other error status or undecodable body
            BackendConnectionError: When the request cannot be sent
        """
        client = self._get_client()
        logger.debug("Backend %s %s", method, path)

        try:
            response = await client.request(
                method,
                path,
                params=params,
                json=json,
                headers=self._headers(headers),
            )
        except httpx.TimeoutException as e:
            logger.error(f"Backend request timed out: {method} {path}: {e}")
            raise BackendConnectionError(
                f"Backend did not respond within {self.timeout} seconds"
            )
        except httpx.RequestError as e:
            logger.error(f"Backend request error: {method} {path}: {e}")
            raise BackendConnectionError(f"Cannot reach backend: {e}")

        if response.status_code in (401, 403):
            message, code = self._error_message(response)
            logger.error(f"Backend rejected credentials [{response.status_code}]: {message}")
            raise BackendAuthError(message)

        if response.status_code >= 400:
            message, code = self._error_message(response)
            logger.error(f"Backend API error [{code or response.status_code}]: {message}")
            raise BackendAPIError(message, status_code=response.status_code, code=code)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Failed to parse backend response: {e}")
            raise BackendAPIError(f"Invalid JSON response: {e}", status_code=response.status_code)

    # ── REST: remote procedures ──────────────────────────────────────────────

    async def rpc(self, name: str, params: Mapping[str, Any] | None = None) -> Any:
        """
        Call a named remote procedure.

        Args:
            name: Procedure name (e.g. "create_tenant")
            params: Named arguments; None values are sent as JSON null

        Returns:
            Whatever the procedure returns
        """
        logger.debug("Calling rpc %s", name, extra={"rpc": name})
        return await self._request("POST", f"{self.REST_PATH}/rpc/{name}", json=dict(params or {}))

    # ── REST: tables ─────────────────────────────────────────────────────────

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Filters | None = None,
        order: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
        single: bool = False,
    ) -> Any:
        """
        Read rows from a table.

        Returns:
            List of rows, or a single row dict when ``single`` is set
        """
        headers = {"Accept": "application/vnd.pgrst.object+json"} if single else None
        params = build_query_params(filters, columns, order, ascending, limit)
        rows = await self._request("GET", f"{self.REST_PATH}/{table}", params=params, headers=headers)
        if rows is None and not single:
            return []
        return rows

    async def insert(
        self,
        table: str,
        values: Mapping[str, Any],
        single: bool = True,
    ) -> Any:
        """Insert a row and return the stored representation."""
        headers = {"Prefer": "return=representation"}
        if single:
            headers["Accept"] = "application/vnd.pgrst.object+json"
        return await self._request(
            "POST", f"{self.REST_PATH}/{table}", json=dict(values), headers=headers
        )

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Filters,
        single: bool = False,
    ) -> Any:
        """Update matching rows and return their new representation."""
        if not filters:
            raise ValueError("update requires at least one filter")
        headers = {"Prefer": "return=representation"}
        if single:
            headers["Accept"] = "application/vnd.pgrst.object+json"
        return await self._request(
            "PATCH",
            f"{self.REST_PATH}/{table}",
            params=build_query_params(filters),
            json=dict(values),
            headers=headers,
        )

    async def delete(self, table: str, filters: Filters) -> None:
        """Delete matching rows."""
        if not filters:
            raise ValueError("delete requires at least one filter")
        await self._request(
            "DELETE", f"{self.REST_PATH}/{table}", params=build_query_params(filters)
        )

    # ── Auth ─────────────────────────────────────────────────────────────────

    def _store_session(self, session: Mapping[str, Any] | None) -> None:
        if session and session.get("access_token"):
            self.access_token = session["access_token"]
            self.refresh_token = session.get("refresh_token")

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """
        Exchange email and password for a session.

        Returns:
            Session dict with ``access_token``, ``refresh_token`` and ``user``
        """
        logger.info("Signing in user")
        session = await self._request(
            "POST",
            f"{self.AUTH_PATH}/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        self._store_session(session)
        return session or {}

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        """
        Register a new account.

        Returns:
            Dict with ``user`` (and a session when email confirmation is off)
        """
        logger.info("Signing up new user")
        data = await self._request(
            "POST",
            f"{self.AUTH_PATH}/signup",
            json={"email": email, "password": password},
        )
        data = data or {}
        # The signup endpoint returns either a bare user or a session
        if "user" not in data and data.get("id"):
            return {"user": data, "session": None}
        return {"user": data.get("user"), "session": data if data.get("access_token") else None}

    async def sign_out(self) -> None:
        """Revoke the current session."""
        if self.access_token:
            await self._request("POST", f"{self.AUTH_PATH}/logout")
        self.access_token = None
        self.refresh_token = None

    async def get_user(self) -> dict[str, Any] | None:
        """Return the signed-in auth user, or None without a session."""
        if not self.access_token:
            return None
        return await self._request("GET", f"{self.AUTH_PATH}/user")

    async def require_user(self) -> dict[str, Any]:
        """Return the signed-in auth user or raise BackendAuthError."""
        user = await self.get_user()
        if not user:
            raise BackendAuthError("Not authenticated")
        return user

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        """Send a password recovery email."""
        await self._request(
            "POST",
            f"{self.AUTH_PATH}/recover",
            params={"redirect_to": redirect_to},
            json={"email": email},
        )


def create_backend_client(
    base_url: str | None = None,
    anon_key: str | None = None,
    timeout: float | None = None,
) -> BackendClient:
    """
    Create a backend client instance.

    Args:
        base_url: Backend project URL (defaults to settings)
        anon_key: Public anon key (defaults to settings)
        timeout: Request timeout in seconds (defaults to settings)

    Returns:
        BackendClient instance
    """
    return BackendClient(base_url=base_url, anon_key=anon_key, timeout=timeout)
