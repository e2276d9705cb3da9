"""
Verdict mapping.

Every response shape the analysis endpoints have produced is reduced to one
canonical AnalysisResult: ``{verdict, confidence, models}`` plus the optional
``model_used``, ``platform`` and ``details`` fields.
"""

import math
from typing import Any, Literal

from pydantic import BaseModel, Field

REAL = "real"
AI_GENERATED = "ai-generated"
UNKNOWN = "unknown"

Verdict = Literal["real", "ai-generated", "unknown"]

_AI_LABEL_MARKERS = ("fake", "ai")


class ModelVerdict(BaseModel):
    """One sub-model's opinion."""
    name: str
    verdict: Verdict
    confidence: int | None = Field(None, ge=0, le=100)


class MediaDetails(BaseModel):
    """Provenance details some endpoints attach to a verdict."""
    device: str | None = None
    authenticity: str | None = None
    date: str | None = None


class AnalysisResult(BaseModel):
    """Canonical analysis response."""
    verdict: Verdict
    confidence: int | None = Field(None, ge=0, le=100)
    models: list[ModelVerdict] | None = None
    model_used: str | None = None
    platform: str | None = None
    details: MediaDetails | None = None


def to_percent(score: float) -> int:
    """Scale a 0..1 score to a 0..100 integer, rounding halves up."""
    return max(0, min(100, int(math.floor(float(score) * 100 + 0.5))))


def is_ai_label(label: str) -> bool:
    lowered = label.lower()
    return any(marker in lowered for marker in _AI_LABEL_MARKERS)


def top_label_score(items: Any) -> tuple[str, float]:
    """
    Return the highest-scoring ``(label, score)`` from a classifier reply.

    Raises ValueError when the reply is not a non-empty list of
    ``{label, score}`` objects.
    """
    if not isinstance(items, list) or not items:
        raise ValueError("Expected a non-empty list of {label, score} entries")
    try:
        ranked = sorted(
            ((str(item["label"]), float(item["score"])) for item in items),
            key=lambda pair: pair[1],
            reverse=True,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed classifier entry: {exc}") from exc
    return ranked[0]


def verdict_from_label_scores(items: Any) -> AnalysisResult:
    """
    Derive a verdict from a Hugging Face ``[{label, score}]`` reply.

    The top entry decides: a label containing "fake" or "ai" means
    AI-generated, anything else means real.
    """
    label, score = top_label_score(items)
    verdict = AI_GENERATED if is_ai_label(label) else REAL
    return AnalysisResult(verdict=verdict, confidence=to_percent(score))


def _coerce_verdict(value: Any) -> str:
    if value is None:
        return UNKNOWN
    text = str(value).strip().lower()
    if text in (REAL, UNKNOWN):
        return text
    return AI_GENERATED


def _coerce_confidence(value: Any) -> int | None:
    if value is None or value == "":
        return None
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Confidence must be finite, got {value!r}")
    # Some replies carry 0..1 float fractions instead of percentages.
    if isinstance(value, float) and 0 <= number <= 1:
        number *= 100
    return max(0, min(100, int(math.floor(number + 0.5))))


def _coerce_models(models: Any) -> list[ModelVerdict] | None:
    if not models:
        return None
    out = []
    for entry in models:
        out.append(ModelVerdict(
            name=str(entry.get("name") or entry.get("model") or "model"),
            verdict=_coerce_verdict(entry.get("verdict")),
            confidence=_coerce_confidence(entry.get("confidence")),
        ))
    return out


def normalize_payload(payload: Any) -> AnalysisResult:
    """
    Normalise a local analysis function reply into an AnalysisResult.

    Accepted shapes:
        {verdict, confidence, models}           canonical
        {isAI, confidence, details}             boolean verdict
        {verdict, score, platform, details}     score instead of confidence
        [{label, score}, ...]                   raw classifier reply
    """
    if isinstance(payload, list):
        return verdict_from_label_scores(payload)
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected analysis payload type: {type(payload).__name__}")

    if "isAI" in payload:
        verdict = AI_GENERATED if payload["isAI"] else REAL
    elif "verdict" in payload:
        verdict = _coerce_verdict(payload["verdict"])
    else:
        raise ValueError("Analysis payload carries no verdict")

    confidence = payload.get("confidence")
    if confidence is None:
        confidence = payload.get("score")

    details = payload.get("details")
    try:
        return AnalysisResult(
            verdict=verdict,
            confidence=_coerce_confidence(confidence),
            models=_coerce_models(payload.get("models")),
            model_used=payload.get("model_used"),
            platform=payload.get("platform"),
            details=MediaDetails(**details) if isinstance(details, dict) else None,
        )
    except (TypeError, AttributeError) as exc:
        raise ValueError(f"Malformed analysis payload: {exc}") from exc
