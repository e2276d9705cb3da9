import io

import httpx
import pytest
from PIL import Image

from truecheck.api.models import remote_models
from truecheck.api.services import session_service
from truecheck.api.services.model_registry import ModelRegistry
from truecheck.core.dispatch import Dispatcher, local_function_endpoint
from truecheck.core.encoding import MultipartEncoding
from truecheck.core.media import MediaFile

LOCAL_URL = "http://testserver/.netlify/functions/analyze"


def png_bytes(size=(8, 8), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def make_dispatcher(handler, encoding=None, endpoint=None) -> Dispatcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Dispatcher(
        encoding or MultipartEncoding(),
        endpoint or local_function_endpoint(LOCAL_URL),
        client,
    )


@pytest.fixture
def image_file() -> MediaFile:
    return MediaFile.from_upload("cat.png", "image/png", png_bytes())


@pytest.fixture
def video_file() -> MediaFile:
    return MediaFile.from_upload("clip.mp4", "video/mp4", b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64)


@pytest.fixture
def registry():
    """Empty detector registry, restored after the test."""
    saved = dict(ModelRegistry._registry)
    ModelRegistry._registry.clear()
    yield ModelRegistry
    ModelRegistry._registry.clear()
    ModelRegistry._registry.update(saved)
    remote_models.configure_transport(None)


@pytest.fixture
def sessions():
    """Session store with no sessions and the default dispatcher restored afterwards."""
    yield session_service
    for session_id in list(session_service._sessions):
        session_service.delete_session(session_id)
    session_service.set_dispatcher_factory(None)
