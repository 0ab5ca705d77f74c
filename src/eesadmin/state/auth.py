"""Auth store: credentials, token verification and server health."""

from __future__ import annotations

from typing import Any

from eesadmin._api import floors as floors_api
from eesadmin._api import health as health_api
from eesadmin._transport import Transport
from eesadmin.credentials import CredentialContext, Credentials
from eesadmin.models.result import ApiResult
from eesadmin.models.settings import ServerHealth
from eesadmin.state._base import StoreBase

NO_TOKEN_MESSAGE = "No authentication token"
INVALID_TOKEN_MESSAGE = "Invalid authentication token"
SERVER_ERROR_MESSAGE = "Server error"


class AuthStore(StoreBase):
    """Front for the credential context plus verification and health checks."""

    name = "auth"
    operations = ("verify",)

    def __init__(self, transport: Transport, credentials: CredentialContext, **kwargs: Any) -> None:
        super().__init__(transport, **kwargs)
        self._credentials = credentials
        self._verified: bool | None = None
        self.server_health = ServerHealth()
        self.ready: bool | None = None
        self.ready_reason: str | None = None

    @property
    def credentials(self) -> Credentials:
        return self._credentials.get()

    @property
    def is_authenticated(self) -> bool:
        """True when a token is held and the last verification did not fail."""
        if not self._credentials.is_authenticated:
            return False
        return self._verified is not False

    def set_credentials(self, *, token: str | None = None, base_url: str | None = None) -> Credentials:
        self._error = None
        if token is not None:
            self._verified = None
        return self._credentials.set(token=token, base_url=base_url)

    def logout(self) -> None:
        self._error = None
        self._verified = None
        self._credentials.clear()

    async def verify(self) -> ApiResult:
        """Check the stored token against an authenticated endpoint."""
        if not self._credentials.is_authenticated:
            self._verified = False
            return self._reject_locally("verify", NO_TOKEN_MESSAGE)

        async def call() -> ApiResult:
            result = await floors_api.list_floors(self._transport)
            if result.success:
                return ApiResult.ok({"verified": True}, status=result.status)
            if result.status == 403:
                return ApiResult.fail(INVALID_TOKEN_MESSAGE, status=403)
            if result.status == 0:
                return result
            return ApiResult.fail(SERVER_ERROR_MESSAGE, status=result.status)

        result = await self._run("verify", call())
        self._verified = result.success
        return result

    async def check_health(self) -> ApiResult:
        """Check ``/health``; an unreachable server is reported as offline."""
        result = await health_api.get_health(self._transport)
        checked_at = self._clock()
        if result.status == 0:
            self.server_health = ServerHealth(status="offline", last_checked=checked_at)
        else:
            self.server_health = ServerHealth.from_payload(
                result.data,
                status="healthy" if result.success else "unhealthy",
                checked_at=checked_at,
            )
        return result

    async def check_ready(self) -> ApiResult:
        """Check ``/ready``; ``ready_reason`` carries the server's refusal reason."""
        result = await health_api.get_ready(self._transport)
        body = result.data if isinstance(result.data, dict) else {}
        self.ready = result.success and body.get("ready") is True
        reason = body.get("reason")
        self.ready_reason = reason if isinstance(reason, str) else None
        if result.status == 0:
            self.ready_reason = result.error
        return result
