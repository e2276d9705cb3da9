"""
Request encoding strategies.

Each strategy turns the current MediaFile into exactly one AnalysisRequest;
the dispatcher only ever sees the request, never the encoding choice.
"""

import base64
from dataclasses import dataclass, field
from typing import Any

from truecheck.core.media import MediaFile


@dataclass(frozen=True)
class AnalysisRequest:
    """Single-use outbound payload. Exactly one of files/content/json is set."""
    files: dict[str, tuple[str, bytes, str]] | None = None
    content: bytes | None = field(default=None, repr=False)
    json: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def as_httpx_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headers": dict(self.headers)}
        if self.files is not None:
            kwargs["files"] = self.files
        elif self.content is not None:
            kwargs["content"] = self.content
        else:
            kwargs["json"] = self.json
        return kwargs


class MultipartEncoding:
    """Form upload with the file under field ``file``."""
    name = "multipart"
    field_name = "file"

    def encode(self, media: MediaFile) -> AnalysisRequest:
        return AnalysisRequest(
            files={self.field_name: (media.filename, media.data, media.content_type)}
        )


class RawBytesEncoding:
    """Raw blob re-wrapped with the original MIME type."""
    name = "raw"

    def encode(self, media: MediaFile) -> AnalysisRequest:
        return AnalysisRequest(
            content=media.data,
            headers={"Content-Type": media.content_type},
        )


def to_data_uri(media: MediaFile) -> str:
    encoded = base64.b64encode(media.data).decode("ascii")
    return f"data:{media.content_type};base64,{encoded}"


def from_data_uri(uri: str) -> tuple[str, bytes]:
    """
    Split a ``data:<mime>;base64,<payload>`` URI into (mime, bytes).

    Raises ValueError for anything that is not a base64 data URI.
    """
    if not uri.startswith("data:") or "," not in uri:
        raise ValueError("media must be a base64 data URI")
    header, payload = uri[5:].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("media must be base64 encoded")
    mime = header[: -len(";base64")] or "application/octet-stream"
    try:
        data = base64.b64decode(payload, validate=True)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc
    return mime, data


class DataUriEncoding:
    """JSON body ``{"media": <data URI>, "type": "image"|"video"}``."""
    name = "data-uri"

    def encode(self, media: MediaFile) -> AnalysisRequest:
        return AnalysisRequest(json={"media": to_data_uri(media), "type": media.kind})
