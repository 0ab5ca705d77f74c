"""Credential context: the base URL and admin token used by the transport.

One :class:`CredentialContext` is created per client and passed to the
transport explicitly. The transport reads it on every call, so a token or
URL change applies to the next request without rebuilding anything.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from eesadmin._constants import AUTH_FAILED_MESSAGE, STORAGE_KEY_API_URL, STORAGE_KEY_TOKEN
from eesadmin.storage import KeyValueStorage

_logger = logging.getLogger(__name__)


class Credentials(BaseModel):
    """Snapshot of the connection credentials."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    base_url: str
    token: str | None = None

    @property
    def has_token(self) -> bool:
        return bool(self.token)


class CredentialSource(Protocol):
    """What the transport needs from the credential context."""

    def get(self) -> Credentials:
        ...

    def invalidate_token(self) -> None:
        ...


class CredentialContext:
    """Mutable holder of the current base URL and admin token.

    Every mutation is written through to durable storage.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        default_base_url: str,
        default_token: str | None = None,
    ) -> None:
        self._storage = storage
        token = storage.get(STORAGE_KEY_TOKEN) or default_token or None
        base_url = storage.get(STORAGE_KEY_API_URL) or default_base_url
        self._credentials = Credentials(base_url=base_url.rstrip("/"), token=token)
        self._auth_failure: str | None = None

    def get(self) -> Credentials:
        return self._credentials

    @property
    def is_authenticated(self) -> bool:
        return self._credentials.has_token

    @property
    def auth_failure(self) -> str | None:
        """Message of the last credential rejection, cleared by :meth:`set`."""
        return self._auth_failure

    def set(self, *, token: str | None = None, base_url: str | None = None) -> Credentials:
        """Update the token and/or base URL; ``None`` leaves a field untouched."""
        update: dict[str, str | None] = {}
        if token is not None:
            self._storage.set(STORAGE_KEY_TOKEN, token)
            update["token"] = token or None
        if base_url is not None:
            self._storage.set(STORAGE_KEY_API_URL, base_url)
            update["base_url"] = base_url.rstrip("/")
        if update:
            self._credentials = Credentials.model_validate({**self._credentials.model_dump(), **update})
            _logger.debug("Credentials updated: %s", sorted(update))
        self._auth_failure = None
        return self._credentials

    def clear(self) -> None:
        """Forget the token in memory and storage; the base URL stays."""
        self._storage.remove(STORAGE_KEY_TOKEN)
        self._credentials = Credentials.model_validate({**self._credentials.model_dump(), "token": None})

    def invalidate_token(self) -> None:
        """Drop a token the server has rejected."""
        _logger.info("Admin token rejected by server; clearing stored token")
        self.clear()
        self._auth_failure = AUTH_FAILED_MESSAGE
