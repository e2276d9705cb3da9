"""
Upload session router.

Endpoints:
  POST   /api/upload/sessions                       — Start a session (idle)
  GET    /api/upload/sessions/{id}                  — Current view state
  POST   /api/upload/sessions/{id}/file             — Select / replace the file
  POST   /api/upload/sessions/{id}/analyze          — Analyse the selected file
  POST   /api/upload/sessions/{id}/clear            — Clear
  POST   /api/upload/sessions/{id}/upload-another   — Upload another
  POST   /api/upload/sessions/{id}/home             — Back to Home
  GET    /api/upload/sessions/{id}/preview/{token}  — Preview bytes
  DELETE /api/upload/sessions/{id}                  — Discard the session
"""

import logging

from fastapi import APIRouter, File, HTTPException, Response, UploadFile, status

from truecheck import config
from truecheck.api.schemas.upload import SessionView
from truecheck.api.services import session_service
from truecheck.core.flow import AnalysisFailed, UploadFlow
from truecheck.core.media import FileTooLarge, MediaFile, is_accepted_type

logger = logging.getLogger(__name__)

router = APIRouter()


def _flow_or_404(session_id: str) -> UploadFlow:
    flow = session_service.get_session(session_id)
    if flow is None:
        raise HTTPException(404, f"Session {session_id} not found")
    return flow


def _view(session_id: str, flow: UploadFlow) -> SessionView:
    snap = flow.snapshot()
    preview = snap["preview"]
    if preview is not None:
        preview = {**preview, "url": f"/api/upload/sessions/{session_id}/preview/{preview['token']}"}
    return SessionView(
        session_id=session_id,
        state=snap["state"],
        file=snap["file"],
        preview=preview,
        result=snap["result"],
        view=snap["view"],
        max_upload_bytes=config.MAX_UPLOAD_BYTES,
    )


@router.post(
    "/sessions",
    response_model=SessionView,
    status_code=status.HTTP_201_CREATED,
    summary="Start an upload session",
)
async def create_session():
    session_id, flow = session_service.create_session()
    return _view(session_id, flow)


@router.get("/sessions/{session_id}", response_model=SessionView, summary="Current session state")
async def get_session(session_id: str):
    return _view(session_id, _flow_or_404(session_id))


@router.post(
    "/sessions/{session_id}/file",
    response_model=SessionView,
    status_code=status.HTTP_200_OK,
    summary="Select an image or video",
)
async def select_file(session_id: str, file: UploadFile = File(..., description="Image or video (max 4 MB)")):
    """
    Select (or replace) the session's file.

    Any previous result is cleared and the previous preview revoked.
    Files above 4 MB are rejected and the session is left untouched.
    """
    flow = _flow_or_404(session_id)
    if not is_accepted_type(file.content_type):
        raise HTTPException(415, f"Unsupported file type: {file.content_type}")

    data = await file.read()
    try:
        flow.select_file(MediaFile.from_upload(file.filename, file.content_type, data))
    except FileTooLarge as exc:
        raise HTTPException(413, str(exc))
    return _view(session_id, flow)


@router.post(
    "/sessions/{session_id}/analyze",
    response_model=SessionView,
    status_code=status.HTTP_200_OK,
    summary="Analyse the selected file",
)
async def analyze(session_id: str):
    """
    Send the selected file for analysis and wait for the verdict.

    While an analysis is already pending this is a no-op that returns the
    'analyzing' view.
    """
    flow = _flow_or_404(session_id)
    try:
        await flow.analyze()
    except AnalysisFailed as exc:
        raise HTTPException(502, str(exc))
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/clear", response_model=SessionView, summary="Clear")
async def clear(session_id: str):
    flow = _flow_or_404(session_id)
    flow.clear()
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/upload-another", response_model=SessionView, summary="Upload another")
async def upload_another(session_id: str):
    flow = _flow_or_404(session_id)
    flow.upload_another()
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/home", response_model=SessionView, summary="Back to Home")
async def back_to_home(session_id: str):
    flow = _flow_or_404(session_id)
    flow.back_to_home()
    return _view(session_id, flow)


@router.get("/sessions/{session_id}/preview/{token}", summary="Preview the selected file")
async def preview(session_id: str, token: str):
    flow = _flow_or_404(session_id)
    current = getattr(flow.state, "preview", None)
    media = session_service.previews().resolve(token)
    if current is None or current.token != token or media is None:
        raise HTTPException(404, "Preview not available")
    return Response(content=media.data, media_type=media.content_type)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Discard a session")
async def delete_session(session_id: str):
    if not session_service.delete_session(session_id):
        raise HTTPException(404, f"Session {session_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
