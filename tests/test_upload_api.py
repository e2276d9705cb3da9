import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import make_dispatcher, png_bytes
from truecheck import config
from truecheck.api.main import app, lifespan

client = TestClient(app)


@pytest.fixture
def replies(sessions):
    """Queue of replies served by the analysis endpoint, in order."""
    queue = []
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        status, payload = queue.pop(0)
        return httpx.Response(status, json=payload)

    sessions.set_dispatcher_factory(lambda: make_dispatcher(handler))
    return queue, calls


def _new_session() -> str:
    r = client.post("/api/upload/sessions")
    assert r.status_code == 201
    assert r.json()["state"] == "idle"
    return r.json()["session_id"]


def _select(session_id, data=None, content_type="image/png", name="a.png"):
    return client.post(
        f"/api/upload/sessions/{session_id}/file",
        files={"file": (name, data if data is not None else png_bytes(), content_type)},
    )


def test_full_happy_path(replies):
    queue, calls = replies
    queue.append((200, {"verdict": "real", "confidence": 87, "models": [{"name": "vit", "verdict": "real", "confidence": 87}]}))
    sid = _new_session()

    selected = _select(sid)
    assert selected.status_code == 200
    body = selected.json()
    assert body["state"] == "file-selected"
    assert body["file"]["kind"] == "image"
    assert body["result"] is None

    preview = client.get(body["preview"]["url"])
    assert preview.status_code == 200
    assert preview.headers["content-type"] == "image/png"
    assert preview.content == png_bytes()

    analyzed = client.post(f"/api/upload/sessions/{sid}/analyze")
    assert analyzed.status_code == 200
    view = analyzed.json()
    assert view["state"] == "result-shown"
    assert view["result"]["verdict"] == "real"
    assert view["view"]["title"] == "Authentic"
    assert view["view"]["confidence_text"] == "Confidence: 87%"
    assert len(calls) == 1


def test_oversized_file_is_rejected_without_state_change(replies):
    sid = _new_session()
    r = _select(sid, data=b"\0" * (config.MAX_UPLOAD_BYTES + 1))
    assert r.status_code == 413
    assert r.json()["detail"] == "File size must be less than 4MB"
    assert client.get(f"/api/upload/sessions/{sid}").json()["state"] == "idle"


def test_non_media_type_is_rejected(replies):
    sid = _new_session()
    r = _select(sid, data=b"%PDF", content_type="application/pdf", name="x.pdf")
    assert r.status_code == 415


def test_failed_analysis_keeps_file(replies):
    queue, _ = replies
    queue.append((500, {"error": "boom"}))
    sid = _new_session()
    _select(sid)

    r = client.post(f"/api/upload/sessions/{sid}/analyze")
    assert r.status_code == 502
    assert r.json()["detail"] == "Analysis failed. Please try again."
    state = client.get(f"/api/upload/sessions/{sid}").json()
    assert state["state"] == "file-selected"
    assert state["file"]["filename"] == "a.png"


def test_analyze_without_file_is_noop(replies):
    _, calls = replies
    sid = _new_session()
    r = client.post(f"/api/upload/sessions/{sid}/analyze")
    assert r.status_code == 200
    assert r.json()["state"] == "idle"
    assert calls == []


def test_replacing_file_clears_result_and_revokes_preview(replies):
    queue, _ = replies
    queue.append((200, {"verdict": "fake", "confidence": 70}))
    sid = _new_session()
    first = _select(sid).json()
    client.post(f"/api/upload/sessions/{sid}/analyze")

    second = _select(sid, name="b.png").json()
    assert second["state"] == "file-selected"
    assert second["result"] is None
    assert client.get(first["preview"]["url"]).status_code == 404
    assert client.get(second["preview"]["url"]).status_code == 200


@pytest.mark.parametrize("action", ["clear", "upload-another", "home"])
def test_reset_actions_empty_the_session(replies, action):
    queue, _ = replies
    queue.append((200, {"verdict": "real", "confidence": 80}))
    sid = _new_session()
    preview_url = _select(sid).json()["preview"]["url"]
    client.post(f"/api/upload/sessions/{sid}/analyze")

    r = client.post(f"/api/upload/sessions/{sid}/{action}")
    assert r.status_code == 200
    body = r.json()
    assert body["state"] == "idle"
    assert body["file"] is None and body["preview"] is None and body["result"] is None
    assert client.get(preview_url).status_code == 404


def test_unknown_session_is_404(replies):
    assert client.get("/api/upload/sessions/nope").status_code == 404
    assert client.post("/api/upload/sessions/nope/analyze").status_code == 404


def test_delete_session(replies):
    sid = _new_session()
    assert client.delete(f"/api/upload/sessions/{sid}").status_code == 204
    assert client.get(f"/api/upload/sessions/{sid}").status_code == 404
    assert client.delete(f"/api/upload/sessions/{sid}").status_code == 404


def test_analyze_while_pending_returns_analyzing_view(sessions):
    async def scenario():
        started = asyncio.Event()
        release = asyncio.Event()
        calls = []

        async def handler(request):
            calls.append(request)
            started.set()
            await release.wait()
            return httpx.Response(200, json={"verdict": "real", "confidence": 80})

        sessions.set_dispatcher_factory(lambda: make_dispatcher(handler))
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
            sid = (await http.post("/api/upload/sessions")).json()["session_id"]
            await http.post(
                f"/api/upload/sessions/{sid}/file",
                files={"file": ("a.png", png_bytes(), "image/png")},
            )
            first = asyncio.create_task(http.post(f"/api/upload/sessions/{sid}/analyze"))
            await started.wait()
            second = await http.post(f"/api/upload/sessions/{sid}/analyze")
            release.set()
            return second, await first, calls

    second, first, calls = asyncio.run(scenario())
    assert second.status_code == 200
    assert second.json()["state"] == "analyzing"
    assert first.json()["state"] == "result-shown"
    assert len(calls) == 1


def test_unknown_flow_variant_fails_at_startup(sessions, registry, monkeypatch):
    sessions.set_dispatcher_factory(None)
    monkeypatch.setattr(config, "FLOW_VARIANT", "carrier-pigeon")

    async def boot():
        async with lifespan(app):
            pass

    with pytest.raises(ValueError, match="FLOW_VARIANT"):
        asyncio.run(boot())


def test_flow_variant_is_fixed_at_startup(sessions, registry, monkeypatch):
    sessions.set_dispatcher_factory(None)
    monkeypatch.setattr(config, "FLOW_VARIANT", "data-uri")

    async def boot():
        async with lifespan(app):
            return sessions.get_dispatcher().encoding.name

    assert asyncio.run(boot()) == "data-uri"
