from truecheck.core.presenter import present
from truecheck.core.verdict import AnalysisResult, MediaDetails, ModelVerdict


def test_real_verdict_banner():
    view = present(AnalysisResult(verdict="real", confidence=80))
    assert (view.title, view.icon, view.tone) == ("Authentic", "✓", "green")
    assert view.confidence_text == "Confidence: 80%"
    assert view.entries == []


def test_ai_verdict_with_models():
    view = present(AnalysisResult(
        verdict="ai-generated",
        confidence=91,
        models=[
            ModelVerdict(name="vit", verdict="ai-generated", confidence=95),
            ModelVerdict(name="siglip", verdict="real", confidence=None),
        ],
    ))
    assert (view.title, view.icon, view.tone) == ("AI-Generated", "⚠", "red")
    assert [(e.name, e.tone, e.confidence_text) for e in view.entries] == [
        ("vit", "red", "95%"),
        ("siglip", "green", None),
    ]


def test_unknown_verdict_without_confidence():
    view = present(AnalysisResult(verdict="unknown"))
    assert view.title == "Inconclusive"
    assert view.confidence_text is None


def test_zero_confidence_is_still_shown():
    assert present(AnalysisResult(verdict="real", confidence=0)).confidence_text == "Confidence: 0%"


def test_details_and_caption():
    view = present(AnalysisResult(
        verdict="real",
        details=MediaDetails(device="Pixel 8", date="2025-03-01"),
        model_used="siglip",
        platform="Instagram",
    ))
    assert [(d.label, d.value) for d in view.details] == [("Device", "Pixel 8"), ("Date", "2025-03-01")]
    assert view.caption == "Model: siglip · Platform: Instagram"
