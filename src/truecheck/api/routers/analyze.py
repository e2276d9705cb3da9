"""Local analysis function router (same-origin endpoint used by the upload flow)."""
import logging

from fastapi import APIRouter, HTTPException, Request, status

from truecheck import config
from truecheck.api.schemas.analysis import AnalysisResult, AnalyzeJsonRequest
from truecheck.api.services.analysis_service import NoFramesError, run_analysis
from truecheck.core.encoding import from_data_uri

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_multipart(request: Request) -> tuple[bytes, str, str]:
    form = await request.form()
    upload = form.get("file")
    if upload is None or isinstance(upload, str):
        raise HTTPException(400, "Missing form field 'file'")
    data = await upload.read()
    mime = upload.content_type or ""
    kind = "video" if mime.startswith("video/") else "image"
    return data, kind, upload.filename or "upload"


async def _read_json(request: Request) -> tuple[bytes, str, str]:
    try:
        body = AnalyzeJsonRequest.model_validate(await request.json())
        _, data = from_data_uri(body.media)
    except ValueError as exc:
        raise HTTPException(400, f"Invalid analysis request: {exc}")
    return data, body.type, "upload"


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Detect AI-generated or deepfake media",
)
async def analyze(request: Request):
    """
    Classify an image or video with every registered Hugging Face detector.

    Accepts either:
        - multipart/form-data with the media under field ``file``
        - JSON ``{"media": "<base64 data URI>", "type": "image"|"video"}``

    Returns:
        verdict, confidence (0-100), per-model breakdown and the leading model
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        data, kind, filename = await _read_multipart(request)
    else:
        data, kind, filename = await _read_json(request)

    if not data:
        raise HTTPException(400, "Empty file.")
    if len(data) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(413, "File exceeds 4 MB limit.")

    try:
        return await run_analysis(data, kind, filename)
    except NoFramesError as exc:
        raise HTTPException(422, str(exc))
    except RuntimeError as exc:
        raise HTTPException(503, str(exc))
    except Exception as exc:
        logger.exception("Analysis error for %s", filename)
        raise HTTPException(500, f"Analysis error: {exc}")
