"""Maps an AnalysisResult onto the result card the client renders."""

from pydantic import BaseModel

from truecheck.core.verdict import AI_GENERATED, REAL, AnalysisResult

_BANNERS = {
    REAL: ("Authentic", "✓", "green"),
    AI_GENERATED: ("AI-Generated", "⚠", "red"),
}
_UNKNOWN_BANNER = ("Inconclusive", "?", "gray")


class ModelRow(BaseModel):
    name: str
    verdict: str
    confidence_text: str | None = None
    tone: str


class DetailRow(BaseModel):
    label: str
    value: str


class VerdictView(BaseModel):
    """Everything the result card needs, already formatted."""
    verdict: str
    title: str
    icon: str
    tone: str
    confidence: int | None = None
    confidence_text: str | None = None
    entries: list[ModelRow] = []
    details: list[DetailRow] = []
    caption: str | None = None


def _tone(verdict: str) -> str:
    return _BANNERS.get(verdict, _UNKNOWN_BANNER)[2]


def _percent(value: int | None) -> str | None:
    return None if value is None else f"{value}%"


def present(result: AnalysisResult) -> VerdictView:
    title, icon, tone = _BANNERS.get(result.verdict, _UNKNOWN_BANNER)

    entries = [
        ModelRow(
            name=m.name,
            verdict=m.verdict,
            confidence_text=_percent(m.confidence),
            tone=_tone(m.verdict),
        )
        for m in result.models or []
    ]

    details = []
    if result.details is not None:
        for label, value in (
            ("Device", result.details.device),
            ("Authenticity", result.details.authenticity),
            ("Date", result.details.date),
        ):
            if value:
                details.append(DetailRow(label=label, value=value))

    caption_parts = []
    if result.model_used:
        caption_parts.append(f"Model: {result.model_used}")
    if result.platform:
        caption_parts.append(f"Platform: {result.platform}")

    return VerdictView(
        verdict=result.verdict,
        title=title,
        icon=icon,
        tone=tone,
        confidence=result.confidence,
        confidence_text=f"Confidence: {result.confidence}%" if result.confidence is not None else None,
        entries=entries,
        details=details,
        caption=" · ".join(caption_parts) or None,
    )
