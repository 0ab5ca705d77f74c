"""Client configuration for eesadmin."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from eesadmin._constants import AUTH_HEADER, BASE_URL, DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT_S
from eesadmin.exceptions import EesConfigError


@dataclasses.dataclass(frozen=True)
class EesConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        API base URL used until an operator stores a different one.
    timeout : float
        Per-request timeout in seconds. Requests exceeding it resolve to
        a failed result with ``status=0``.
    default_token : str or None
        Admin token used when durable storage holds none (development).
    storage_path : Path or None
        JSON file backing durable storage. ``None`` keeps credentials and
        preferences in memory only.
    records_page_size : int
        Default page size for record listings.
    auth_header : str
        Name of the header carrying the admin token.
    """

    base_url: str = BASE_URL
    timeout: float = DEFAULT_TIMEOUT_S
    default_token: str | None = None
    storage_path: Path | None = None
    records_page_size: int = DEFAULT_PAGE_SIZE
    auth_header: str = AUTH_HEADER

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise EesConfigError(f"timeout must be positive, got {self.timeout}")
        if self.records_page_size <= 0:
            raise EesConfigError(f"records_page_size must be positive, got {self.records_page_size}")

    @classmethod
    def from_env(cls, **overrides: Any) -> EesConfig:
        """Create configuration from environment variables.

        Reads ``EES_API_URL``, ``EES_API_TIMEOUT`` (seconds),
        ``EES_DEFAULT_ADMIN_TOKEN``, ``EES_STORAGE_PATH`` and
        ``EES_RECORDS_PAGE_SIZE``. Explicit keyword arguments override
        environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "EES_API_URL": "base_url",
            "EES_DEFAULT_ADMIN_TOKEN": "default_token",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        storage_env = env.get("EES_STORAGE_PATH")
        if storage_env:
            config_kwargs["storage_path"] = Path(storage_env).expanduser()

        try:
            timeout_env = env.get("EES_API_TIMEOUT")
            if timeout_env:
                config_kwargs["timeout"] = float(timeout_env)

            page_size_env = env.get("EES_RECORDS_PAGE_SIZE")
            if page_size_env:
                config_kwargs["records_page_size"] = int(page_size_env)
        except ValueError as exc:
            raise EesConfigError(f"Invalid numeric environment value: {exc}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
