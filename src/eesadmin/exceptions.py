"""Custom exception hierarchy for eesadmin.

Network and HTTP failures are never raised; they resolve to a failed
:class:`~eesadmin.models.result.ApiResult`. The exceptions below cover
programming and client-side validation errors only.
"""

from __future__ import annotations


class EesError(Exception):
    """Base exception for all eesadmin errors."""


class EesConfigError(EesError):
    """Invalid or missing configuration."""


class EesClientError(EesError):
    """Client used outside of its ``async with`` block."""


class FloorValidationError(EesError):
    """A floor draft failed client-side validation.

    ``errors`` maps a form field (``id``, ``nodes``, ``edge_2`` ...) to
    the message shown next to it. Nothing was sent to the server.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Floor draft is invalid: {fields}")
