"""HTTP transport normalizing every call into an :class:`ApiResult`."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from eesadmin._api._envelope import (
    extract_error_data,
    extract_error_message,
    extract_success_message,
    normalize_success_payload,
)
from eesadmin._constants import AUTH_FAILED_MESSAGE, NETWORK_ERROR_MESSAGE, TIMEOUT_MESSAGE
from eesadmin._normalize import drop_none
from eesadmin._redact import redact_for_log
from eesadmin.config import EesConfig
from eesadmin.credentials import CredentialSource
from eesadmin.models.result import ApiResult

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        binary_body: bool = False,
    ) -> ApiResult:
        ...


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HttpTransport:
    """aiohttp transport that authenticates, times out and normalizes replies.

    Credentials are read from *credentials* on every call. The transport
    never raises for network, timeout or HTTP failures.
    """

    def __init__(
        self,
        config: EesConfig,
        http_session: aiohttp.ClientSession,
        credentials: CredentialSource,
    ) -> None:
        self._config = config
        self._http = http_session
        self._credentials = credentials

    def _headers(self, token: str | None, *, multipart: bool) -> dict[str, str]:
        headers = {self._config.auth_header: token or ""}
        if not multipart:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        binary_body: bool = False,
    ) -> ApiResult:
        creds = self._credentials.get()
        url = f"{creds.base_url}{path}"
        multipart = binary_body or isinstance(body, aiohttp.FormData)
        params = {key: _query_value(value) for key, value in drop_none(dict(query or {})).items()}

        kwargs: dict[str, Any] = {
            "headers": self._headers(creds.token, multipart=multipart),
            "timeout": aiohttp.ClientTimeout(total=self._config.timeout),
        }
        if params:
            kwargs["params"] = params
        if body is not None:
            if multipart:
                kwargs["data"] = body
            else:
                kwargs["data"] = json.dumps(body)

        _logger.debug(
            "%s %s query=%s body=%s",
            method,
            url,
            redact_for_log(params),
            "<multipart>" if multipart else redact_for_log(body),
        )

        try:
            async with self._http.request(method, url, **kwargs) as resp:
                status = resp.status
                reason = resp.reason
                raw = await resp.read()
        except asyncio.TimeoutError:
            _logger.debug("%s %s timed out after %ss", method, path, self._config.timeout)
            return ApiResult.fail(TIMEOUT_MESSAGE, status=0)
        except (aiohttp.ClientError, OSError, ValueError) as exc:
            _logger.debug("%s %s failed: %s", method, path, exc)
            return ApiResult.fail(str(exc) or NETWORK_ERROR_MESSAGE, status=0)

        try:
            payload: Any = json.loads(raw) if raw else {}
        except ValueError:
            payload = {}

        _logger.debug("%s %s -> %s %s", method, path, status, redact_for_log(payload))

        if status == 403:
            self._credentials.invalidate_token()
            return ApiResult.fail(AUTH_FAILED_MESSAGE, status=403)

        if not 200 <= status < 300:
            error_data = extract_error_data(payload)
            if error_data is None and payload:
                error_data = payload
            return ApiResult.fail(
                extract_error_message(payload, status, reason),
                status=status,
                data=error_data,
            )

        return ApiResult.ok(
            normalize_success_payload(payload),
            status=status,
            message=extract_success_message(payload),
        )
