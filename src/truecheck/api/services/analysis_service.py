"""Analysis service — fans media out to every registered detector and aggregates."""
import asyncio
import logging

from truecheck.api.models.frame_extractor import extract_frames
from truecheck.api.services.model_registry import ModelRegistry
from truecheck.core.verdict import AI_GENERATED, REAL, AnalysisResult, ModelVerdict, to_percent

logger = logging.getLogger(__name__)


class NoFramesError(ValueError):
    """Raised when a video yields nothing the detectors can classify."""


async def run_analysis(data: bytes, kind: str, filename: str = "") -> AnalysisResult:
    """
    Classify an image or video with every registered detector.

    Images are sent as-is; videos are sampled into JPEG frames first.
    Detectors that fail are skipped. The overall verdict is AI-generated
    when the mean fake probability exceeds 0.5.

    Raises:
        NoFramesError: a video could not be decoded
        RuntimeError: no detector is registered or none produced an answer
    """
    detectors = ModelRegistry.detectors()
    if not detectors:
        raise RuntimeError("No detection models are available.")

    if kind == "video":
        frames = await asyncio.to_thread(extract_frames, data)
        if not frames:
            raise NoFramesError("Could not extract frames from video")
    else:
        frames = [data]

    logger.info("Analysing %s (%s, %d frame(s)) with %d detector(s)",
                filename or "upload", kind, len(frames), len(detectors))

    outcomes = await asyncio.gather(
        *(asyncio.to_thread(detector.predict, frames) for detector in detectors)
    )
    answered = [o for o in outcomes if o is not None]
    skipped = len(outcomes) - len(answered)
    if skipped:
        logger.warning("%d of %d detector(s) did not answer", skipped, len(outcomes))
    if not answered:
        raise RuntimeError("All detection models failed.")

    mean_ai = sum(o["ai_probability"] for o in answered) / len(answered)
    is_ai = mean_ai > 0.5
    leader = max(answered, key=lambda o: o["confidence"])

    return AnalysisResult(
        verdict=AI_GENERATED if is_ai else REAL,
        confidence=to_percent(mean_ai if is_ai else 1.0 - mean_ai),
        models=[
            ModelVerdict(name=o["name"], verdict=o["verdict"], confidence=o["confidence"])
            for o in answered
        ],
        model_used=leader["name"],
    )
