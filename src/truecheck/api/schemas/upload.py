"""Upload session view schemas (what the browser renders)."""
from pydantic import BaseModel

from truecheck.core.presenter import VerdictView
from truecheck.core.verdict import AnalysisResult


class FileInfo(BaseModel):
    filename: str
    content_type: str
    kind: str
    size: int


class PreviewInfo(BaseModel):
    token: str
    content_type: str
    url: str


class SessionView(BaseModel):
    """Current state of one upload session."""
    session_id: str
    state: str
    file: FileInfo | None = None
    preview: PreviewInfo | None = None
    result: AnalysisResult | None = None
    view: VerdictView | None = None
    max_upload_bytes: int
