"""Upload-and-Verify flow: intake, encoding, dispatch and presentation."""

from truecheck.core.dispatch import Dispatcher, Endpoint, build_dispatcher
from truecheck.core.flow import AnalysisFailed, UploadFlow
from truecheck.core.media import FileTooLarge, MediaFile, PreviewStore
from truecheck.core.verdict import AnalysisResult

__all__ = [
    "AnalysisFailed",
    "AnalysisResult",
    "Dispatcher",
    "Endpoint",
    "FileTooLarge",
    "MediaFile",
    "PreviewStore",
    "UploadFlow",
    "build_dispatcher",
]
