# speechkit/core/errors.py

from typing import Any, Optional

import httpx


class ElevenLabsError(Exception):
    """Base class for every error raised by speechkit"""


class ConfigurationError(ElevenLabsError):
    """Missing or invalid client configuration (API key, timeout, base URL)"""


class TransportError(ElevenLabsError):
    """Network or I/O failure while talking to the ElevenLabs API"""


class StreamError(TransportError):
    """
    Transport failure after a streaming response was opened.

    bytes_written tells how much audio already reached the sink.
    0 means nothing was written; anything else means the sink holds
    partial audio and the caller should discard it.
    """

    def __init__(self, message: str, bytes_written: int = 0):
        super().__init__(message)
        self.bytes_written = bytes_written


class SinkError(ElevenLabsError):
    """The caller-supplied sink raised while audio was being written to it"""

    def __init__(self, message: str, bytes_written: int = 0):
        super().__init__(message)
        self.bytes_written = bytes_written


class APIError(ElevenLabsError):
    """
    Non-success HTTP status returned by the ElevenLabs API.

    ElevenLabs reports errors as {"detail": {"status": ..., "message": ...}}
    or, for request validation failures, {"detail": [{"loc", "msg", "type"}]}.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        status: Optional[str] = None,
        detail: Any = None,
    ):
        self.status_code = status_code
        self.message = message
        self.status = status
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status:
            return f"ElevenLabs API error {self.status_code} ({self.status}): {self.message}"
        return f"ElevenLabs API error {self.status_code}: {self.message}"

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @classmethod
    def from_response(cls, response: httpx.Response) -> "APIError":
        """Build an APIError from a response whose body has already been read"""
        try:
            body = response.json()
        except ValueError:
            text = response.text.strip()
            return cls(response.status_code, text or response.reason_phrase)

        detail = body.get("detail", body) if isinstance(body, dict) else body
        status = None

        if isinstance(detail, dict):
            status = detail.get("status")
            message = detail.get("message") or str(detail)
        elif isinstance(detail, list):
            # Validation errors: one entry per offending field
            parts = []
            for entry in detail:
                if isinstance(entry, dict):
                    loc = ".".join(str(p) for p in entry.get("loc", []))
                    parts.append(f"{loc}: {entry.get('msg')}" if loc else str(entry.get("msg")))
                else:
                    parts.append(str(entry))
            message = "; ".join(parts)
            status = "validation_error"
        else:
            message = str(detail)

        return cls(response.status_code, message, status=status, detail=detail)
