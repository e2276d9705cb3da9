"""
Upload session service.

Keeps one UploadFlow per browser session. The dispatcher variant is chosen
once, from FLOW_VARIANT, when the first session is created.
"""

import logging
import uuid
from typing import Callable, Optional

import httpx

from truecheck import config
from truecheck.core.dispatch import VARIANTS, Dispatcher, build_dispatcher
from truecheck.core.flow import UploadFlow
from truecheck.core.media import PreviewStore

logger = logging.getLogger(__name__)

# In-memory session store (swap for a shared store when running multiple workers)
_sessions: dict[str, UploadFlow] = {}
_previews = PreviewStore()

_async_client: httpx.AsyncClient | None = None
_dispatcher_factory: Optional[Callable[[], Dispatcher]] = None
_dispatcher: Dispatcher | None = None


def _default_dispatcher() -> Dispatcher:
    global _async_client
    if config.FLOW_VARIANT not in VARIANTS:
        raise ValueError(
            f"Unknown FLOW_VARIANT {config.FLOW_VARIANT!r}; expected one of {', '.join(VARIANTS)}"
        )
    if _async_client is None:
        _async_client = httpx.AsyncClient(timeout=config.HTTP_TIMEOUT)
    dispatcher = build_dispatcher(config.FLOW_VARIANT, _async_client)
    logger.info("Flow variant '%s' → %s", config.FLOW_VARIANT, dispatcher.endpoint.url)
    return dispatcher


def set_dispatcher_factory(factory: Optional[Callable[[], Dispatcher]]) -> None:
    """Override how the shared dispatcher is built (None restores the default)."""
    global _dispatcher_factory, _dispatcher
    _dispatcher_factory = factory
    _dispatcher = None


def get_dispatcher() -> Dispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = (_dispatcher_factory or _default_dispatcher)()
    return _dispatcher


def previews() -> PreviewStore:
    return _previews


def create_session() -> tuple[str, UploadFlow]:
    """Register a new idle flow and return its ID."""
    session_id = str(uuid.uuid4())
    flow = UploadFlow(get_dispatcher(), _previews)
    _sessions[session_id] = flow
    logger.info("Session %s created", session_id)
    return session_id, flow


def get_session(session_id: str) -> Optional[UploadFlow]:
    return _sessions.get(session_id)


def delete_session(session_id: str) -> bool:
    flow = _sessions.pop(session_id, None)
    if flow is None:
        return False
    flow.dispose()
    logger.info("Session %s discarded", session_id)
    return True


async def shutdown() -> None:
    """Drop every session and close the outbound client."""
    global _async_client, _dispatcher
    for session_id in list(_sessions):
        delete_session(session_id)
    _dispatcher = None
    if _async_client is not None:
        await _async_client.aclose()
        _async_client = None
