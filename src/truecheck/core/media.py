"""
Media Intake Module
Holds the user-supplied file, its size check and revocable preview handles.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field

from truecheck import config

logger = logging.getLogger(__name__)

SIZE_LIMIT_MESSAGE = "File size must be less than 4MB"


class FileTooLarge(ValueError):
    """Raised when a selected file exceeds the upload ceiling."""

    def __init__(self, size: int, limit: int = config.MAX_UPLOAD_BYTES):
        super().__init__(SIZE_LIMIT_MESSAGE)
        self.size = size
        self.limit = limit


@dataclass(frozen=True)
class MediaFile:
    """A selected image or video, held in memory only."""
    filename: str
    content_type: str
    data: bytes = field(repr=False)

    @classmethod
    def from_upload(cls, filename: str | None, content_type: str | None, data: bytes) -> "MediaFile":
        return cls(
            filename=filename or "upload",
            content_type=content_type or "application/octet-stream",
            data=data,
        )

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def kind(self) -> str:
        """'image' or 'video', from the MIME prefix; anything else reads as image."""
        return "video" if self.content_type.startswith("video/") else "image"


def check_size(media: MediaFile, limit: int = config.MAX_UPLOAD_BYTES) -> None:
    """Reject files strictly larger than ``limit`` bytes."""
    if media.size > limit:
        raise FileTooLarge(media.size, limit)


def is_accepted_type(content_type: str | None) -> bool:
    """Mirror of the picker's ``image/*,video/*`` accept filter."""
    if not content_type:
        return False
    return content_type.split("/", 1)[0] in config.ACCEPTED_KINDS


@dataclass
class PreviewHandle:
    """Revocable reference to a MediaFile's bytes for on-screen display."""
    token: str
    content_type: str
    revoked: bool = False


class PreviewStore:
    """Resolves live preview tokens to bytes. Revoked tokens are forgotten."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, MediaFile] = {}

    def create(self, media: MediaFile) -> PreviewHandle:
        token = uuid.uuid4().hex
        with self._lock:
            self._entries[token] = media
        return PreviewHandle(token=token, content_type=media.content_type)

    def resolve(self, token: str) -> MediaFile | None:
        with self._lock:
            return self._entries.get(token)

    def revoke(self, handle: PreviewHandle | None) -> None:
        if handle is None or handle.revoked:
            return
        with self._lock:
            self._entries.pop(handle.token, None)
        handle.revoked = True
        logger.debug("Preview %s revoked", handle.token)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
