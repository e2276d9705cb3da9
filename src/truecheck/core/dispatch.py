"""
Analysis dispatch.

An Endpoint pairs a URL with the reader that understands its reply; a
Dispatcher pairs an Endpoint with an encoding strategy. The three historical
front-end variants are just three such pairings, chosen once at startup.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import httpx

from truecheck import config
from truecheck.core.encoding import (
    AnalysisRequest,
    DataUriEncoding,
    MultipartEncoding,
    RawBytesEncoding,
)
from truecheck.core.media import MediaFile
from truecheck.core.verdict import AnalysisResult, normalize_payload, verdict_from_label_scores

logger = logging.getLogger(__name__)

VARIANT_MULTIPART = "multipart"
VARIANT_HUGGINGFACE = "huggingface"
VARIANT_DATA_URI = "data-uri"
VARIANTS = (VARIANT_MULTIPART, VARIANT_HUGGINGFACE, VARIANT_DATA_URI)


class Encoding(Protocol):
    name: str

    def encode(self, media: MediaFile) -> AnalysisRequest: ...


def read_verdict_payload(payload: Any) -> AnalysisResult:
    return normalize_payload(payload)


def read_label_scores(payload: Any) -> AnalysisResult:
    return verdict_from_label_scores(payload)


@dataclass(frozen=True)
class Endpoint:
    """Where a request goes and how its JSON reply is read."""
    url: str
    reader: Callable[[Any], AnalysisResult]
    headers: dict[str, str] = field(default_factory=dict)


def local_function_endpoint(url: str = config.ANALYZE_ENDPOINT_URL) -> Endpoint:
    return Endpoint(url=url, reader=read_verdict_payload)


def huggingface_endpoint(
    model_id: str = config.HF_MODEL_ID,
    base_url: str = config.HF_API_URL,
    token: str = config.HF_TOKEN,
) -> Endpoint:
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return Endpoint(url=base_url.rstrip("/") + "/" + model_id, reader=read_label_scores, headers=headers)


class Dispatcher:
    """Sends one encoded MediaFile to one endpoint per call. No retries."""

    def __init__(self, encoding: Encoding, endpoint: Endpoint, client: httpx.AsyncClient):
        self.encoding = encoding
        self.endpoint = endpoint
        self._client = client

    async def dispatch(self, media: MediaFile) -> AnalysisResult:
        request = self.encoding.encode(media)
        kwargs = request.as_httpx_kwargs()
        kwargs["headers"] = {**self.endpoint.headers, **kwargs["headers"]}

        logger.info(
            "Dispatching %s (%d bytes) to %s as %s",
            media.filename, media.size, self.endpoint.url, self.encoding.name,
        )
        response = await self._client.post(self.endpoint.url, **kwargs)
        response.raise_for_status()
        return self.endpoint.reader(response.json())


def build_dispatcher(variant: str, client: httpx.AsyncClient) -> Dispatcher:
    """Wire the encoding/endpoint pair for a configured flow variant."""
    if variant == VARIANT_MULTIPART:
        return Dispatcher(MultipartEncoding(), local_function_endpoint(), client)
    if variant == VARIANT_HUGGINGFACE:
        return Dispatcher(RawBytesEncoding(), huggingface_endpoint(), client)
    if variant == VARIANT_DATA_URI:
        return Dispatcher(DataUriEncoding(), local_function_endpoint(), client)
    raise ValueError(f"Unknown flow variant {variant!r}; expected one of {', '.join(VARIANTS)}")
