"""
Hugging Face inference wrappers.

Each detector posts raw image bytes to one hosted classifier on the
Hugging Face inference API and reduces its ``[{label, score}]`` reply to a
single fake probability. Nothing is loaded locally; startup is instant.

Set HF_TOKEN (in the environment or .env) for authenticated rate limits.
"""

import logging
import threading
from typing import Any

import httpx

from truecheck import config
from truecheck.core.verdict import AI_GENERATED, REAL, is_ai_label, to_percent, top_label_score

logger = logging.getLogger(__name__)

# Shared persistent HTTP client with connection pooling.
# httpx.Client is thread-safe for concurrent requests.
_client_lock = threading.Lock()
_shared_client: httpx.Client | None = None
_transport: httpx.BaseTransport | None = None


def configure_transport(transport: httpx.BaseTransport | None) -> None:
    """Swap the transport used by the shared client (closes the current client)."""
    global _shared_client, _transport
    with _client_lock:
        if _shared_client is not None:
            _shared_client.close()
        _shared_client = None
        _transport = transport


def _get_client() -> httpx.Client:
    """Return (or lazily create) the shared persistent httpx client."""
    global _shared_client
    if _shared_client is None:
        with _client_lock:
            if _shared_client is None:  # double-checked locking
                _shared_client = httpx.Client(
                    timeout=config.HTTP_TIMEOUT,
                    transport=_transport,
                    limits=httpx.Limits(
                        max_connections=20,
                        max_keepalive_connections=10,
                        keepalive_expiry=30,
                    ),
                )
    return _shared_client


def close_client() -> None:
    configure_transport(_transport)


def _post_bytes(url: str, data: bytes, headers: dict[str, str]) -> Any:
    """Synchronous raw-bytes POST. Returns decoded JSON, or None on failure."""
    try:
        r = _get_client().post(url, content=data, headers=headers)
        r.raise_for_status()
        return r.json()
    except httpx.ConnectError:
        logger.error("Hugging Face inference unreachable at %s", url)
        return None
    except httpx.TimeoutException:
        logger.error("Hugging Face inference timed out (%ss) for %s", config.HTTP_TIMEOUT, url)
        return None
    except httpx.HTTPStatusError as exc:
        logger.error("Hugging Face inference returned HTTP %s for %s", exc.response.status_code, url)
        return None
    except Exception as exc:
        logger.error("Hugging Face inference error for %s: %s", url, exc)
        return None


# ─────────────────────────────────────────────────────────────────────────────
class HuggingFaceDetector:
    """
    One hosted image classifier.
    fake_probability(data: bytes) -> float | None
    """

    def __init__(self, model_id: str, base_url: str = config.HF_API_URL, token: str = config.HF_TOKEN):
        self.model_id = model_id
        self.url = base_url.rstrip("/") + "/" + model_id
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}
        logger.info("✓ HuggingFaceDetector registered for %s", model_id)

    @property
    def name(self) -> str:
        return self.model_id.split("/")[-1]

    def fake_probability(self, data: bytes) -> float | None:
        """Probability (0..1) that ``data`` is AI-generated, or None if unavailable."""
        reply = _post_bytes(self.url, data, self._headers)
        if reply is None:
            return None
        try:
            label, score = top_label_score(reply)
        except ValueError as exc:
            logger.error("Unexpected reply from %s: %s", self.model_id, exc)
            return None
        return score if is_ai_label(label) else 1.0 - score

    def predict(self, frames: list[bytes]) -> dict | None:
        """
        Classify one or more frames and average the fake probability.

        Returns dict with: name, verdict, confidence, ai_probability
        """
        scores = [p for p in (self.fake_probability(frame) for frame in frames) if p is not None]
        if not scores:
            return None

        ai_probability = sum(scores) / len(scores)
        is_ai = ai_probability > 0.5
        return {
            "name": self.name,
            "verdict": AI_GENERATED if is_ai else REAL,
            "confidence": to_percent(ai_probability if is_ai else 1.0 - ai_probability),
            "ai_probability": ai_probability,
        }
