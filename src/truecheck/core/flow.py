"""
Upload-and-Verify flow.

One explicit state at a time, each carrying only the payload it needs:

    Idle -> FileSelected -> Analyzing -> ResultShown
      ^          |               |             |
      +----------+---- reset ----+-------------+

A new selection is accepted from any state and always drops the previous
result. Resets (Clear / Upload another / Back to Home) always land in Idle.
"""

import logging
from dataclasses import dataclass
from typing import Any

from truecheck.core.dispatch import Dispatcher
from truecheck.core.media import MediaFile, PreviewHandle, PreviewStore, check_size
from truecheck.core.presenter import VerdictView, present
from truecheck.core.verdict import AnalysisResult

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Analysis failed. Please try again."


class AnalysisFailed(RuntimeError):
    """Raised when a dispatched analysis could not produce a result."""

    def __init__(self, message: str = ANALYSIS_FAILED_MESSAGE):
        super().__init__(message)


@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class FileSelected:
    media: MediaFile
    preview: PreviewHandle
    name = "file-selected"


@dataclass(frozen=True)
class Analyzing:
    media: MediaFile
    preview: PreviewHandle
    name = "analyzing"


@dataclass(frozen=True)
class ResultShown:
    media: MediaFile
    preview: PreviewHandle
    result: AnalysisResult
    view: VerdictView
    name = "result-shown"


FlowState = Idle | FileSelected | Analyzing | ResultShown


class UploadFlow:
    """Drives a single user's intake, analysis and result display."""

    def __init__(self, dispatcher: Dispatcher, previews: PreviewStore | None = None):
        self.dispatcher = dispatcher
        self.previews = previews if previews is not None else PreviewStore()
        self._state: FlowState = Idle()

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def is_analyzing(self) -> bool:
        return isinstance(self._state, Analyzing)

    # ------------------------------------------------------------------ #
    def select_file(self, media: MediaFile) -> FileSelected:
        """Accept a new file, or raise FileTooLarge leaving state untouched."""
        check_size(media)
        self._release_preview()
        selected = FileSelected(media=media, preview=self.previews.create(media))
        self._state = selected
        logger.info("Selected %s (%s, %d bytes)", media.filename, media.content_type, media.size)
        return selected

    async def analyze(self) -> AnalysisResult | None:
        """
        Run one analysis of the current file.

        Returns None without doing anything when there is no file or an
        analysis is already pending. On failure the flow returns to
        FileSelected with the same file and preview, and AnalysisFailed is
        raised.
        """
        current = self._state
        if isinstance(current, (Idle, Analyzing)):
            return None

        pending = Analyzing(media=current.media, preview=current.preview)
        self._state = pending
        try:
            result = await self.dispatcher.dispatch(pending.media)
        except Exception as exc:
            logger.exception("Analysis error for %s", pending.media.filename)
            if self._state is not pending:
                return None
            self._state = FileSelected(media=pending.media, preview=pending.preview)
            raise AnalysisFailed() from exc
        else:
            if self._state is not pending:
                # Reset or replaced while the request was in flight.
                logger.info("Discarding stale result for %s", pending.media.filename)
                return None

            self._state = ResultShown(
                media=pending.media,
                preview=pending.preview,
                result=result,
                view=present(result),
            )
            return result
        finally:
            if self._state is pending:
                # Cancelled mid-request.
                logger.info("Analysis of %s cancelled", pending.media.filename)
                self._state = FileSelected(media=pending.media, preview=pending.preview)

    # ------------------------------------------------------------------ #
    def clear(self) -> Idle:
        return self._reset()

    def upload_another(self) -> Idle:
        return self._reset()

    def back_to_home(self) -> Idle:
        return self._reset()

    def dispose(self) -> None:
        self._reset()

    def _reset(self) -> Idle:
        self._release_preview()
        self._state = Idle()
        return self._state

    def _release_preview(self) -> None:
        preview = getattr(self._state, "preview", None)
        self.previews.revoke(preview)

    # ------------------------------------------------------------------ #
    def snapshot(self) -> dict[str, Any]:
        """Plain view of the current state for rendering."""
        state = self._state
        snap: dict[str, Any] = {
            "state": state.name,
            "file": None,
            "preview": None,
            "result": None,
            "view": None,
        }
        if isinstance(state, Idle):
            return snap
        snap["file"] = {
            "filename": state.media.filename,
            "content_type": state.media.content_type,
            "kind": state.media.kind,
            "size": state.media.size,
        }
        snap["preview"] = {"token": state.preview.token, "content_type": state.preview.content_type}
        if isinstance(state, ResultShown):
            snap["result"] = state.result
            snap["view"] = state.view
        return snap
