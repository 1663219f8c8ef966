import asyncio

import httpx
import pytest

from client.features.uploads import UploadCoordinator, UploadFile, UploadProgress, UploadState
from shared.protocol.commands import RenderKind
from shared.protocol.constants import ALARM_COLOR, MAX_UPLOAD_SIZE


def _coordinator(renderer, config, handler, progress=None):
    return UploadCoordinator(renderer, config, progress=progress, transport=httpx.MockTransport(handler))


def _ok(requests):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    return handler


@pytest.mark.asyncio
async def test_file_at_exact_limit_is_transferred(renderer, config):
    requests = []
    uploads = _coordinator(renderer, config, _ok(requests))

    tasks = uploads.submit([UploadFile("big.bin", MAX_UPLOAD_SIZE, b"x")])
    results = await asyncio.gather(*tasks)
    await uploads.aclose()

    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert str(requests[0].url) == "http://chat.test:10000/upload"
    assert results[0].state is UploadState.SUCCEEDED
    assert renderer.calls == []


@pytest.mark.asyncio
async def test_file_over_limit_is_rejected_without_network_call(renderer, config):
    requests = []
    uploads = _coordinator(renderer, config, _ok(requests))

    tasks = uploads.submit([UploadFile("huge.bin", MAX_UPLOAD_SIZE + 1, b"x")])
    await uploads.aclose()

    assert tasks == []
    assert requests == []
    assert len(renderer.calls) == 1
    kind, payload = renderer.calls[0]
    assert kind is RenderKind.ERROR
    assert "file too large" in payload["text"].lower()
    assert payload["color"] == ALARM_COLOR


@pytest.mark.asyncio
async def test_multipart_body_carries_single_file_field(renderer, config):
    requests = []
    uploads = _coordinator(renderer, config, _ok(requests))

    await asyncio.gather(*uploads.submit([UploadFile("notes.txt", 5, b"hello")]))
    await uploads.aclose()

    body = requests[0].read()
    assert requests[0].headers["content-type"].startswith("multipart/form-data")
    assert b'name="file"' in body
    assert b'filename="notes.txt"' in body
    assert b"hello" in body


@pytest.mark.asyncio
async def test_batch_transfers_run_concurrently(renderer, config):
    gate = asyncio.Event()
    started = []

    async def handler(request: httpx.Request) -> httpx.Response:
        started.append(request)
        await gate.wait()
        return httpx.Response(200)

    uploads = _coordinator(renderer, config, handler)
    tasks = uploads.submit([UploadFile("a.txt", 1, b"a"), UploadFile("b.txt", 1, b"b")])

    for _ in range(50):
        if len(started) == 2:
            break
        await asyncio.sleep(0)
    assert len(started) == 2
    assert uploads.outstanding == 2

    gate.set()
    await asyncio.gather(*tasks)
    await uploads.aclose()
    assert uploads.outstanding == 0


@pytest.mark.asyncio
async def test_one_rejected_transfer_does_not_affect_the_other(renderer, config):
    def handler(request: httpx.Request) -> httpx.Response:
        body = request.read()
        return httpx.Response(500 if b"bad.txt" in body else 200)

    uploads = _coordinator(renderer, config, handler)
    results = await asyncio.gather(
        *uploads.submit([UploadFile("bad.txt", 1, b"a"), UploadFile("good.txt", 1, b"b")])
    )
    await uploads.aclose()

    states = {task.file.name: task.state for task in results}
    assert states == {"bad.txt": UploadState.FAILED, "good.txt": UploadState.SUCCEEDED}
    assert len(renderer.calls) == 1
    kind, payload = renderer.calls[0]
    assert kind is RenderKind.ERROR
    assert "rejected by the server" in payload["text"]
    assert "bad.txt" in payload["text"]
    assert payload["color"] == ALARM_COLOR


@pytest.mark.asyncio
async def test_transport_error_is_reported_with_distinct_wording(renderer, config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    uploads = _coordinator(renderer, config, handler)
    (task,) = await asyncio.gather(*uploads.submit([UploadFile("a.txt", 1, b"a")]))
    await uploads.aclose()

    assert task.state is UploadState.FAILED
    kind, payload = renderer.calls[0]
    assert kind is RenderKind.ERROR
    assert "transport error" in payload["text"].lower()
    assert "rejected" not in payload["text"]


@pytest.mark.asyncio
async def test_progress_indicator_tracks_outstanding_transfers(renderer, config):
    gate = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        await gate.wait()
        return httpx.Response(200)

    progress = UploadProgress()
    shown = []
    progress.add_listener(shown.append)
    uploads = _coordinator(renderer, config, handler, progress=progress)

    tasks = uploads.submit([UploadFile("a.txt", 1, b"a"), UploadFile("b.txt", 1, b"b")])
    await asyncio.sleep(0)
    assert progress.visible
    assert shown == [True]

    gate.set()
    await asyncio.gather(*tasks)
    await uploads.aclose()
    assert not progress.visible
    assert shown == [True, False]


@pytest.mark.asyncio
async def test_resubmitting_same_file_creates_a_new_task(renderer, config):
    requests = []
    uploads = _coordinator(renderer, config, _ok(requests))
    upload_file = UploadFile("same.txt", 4, b"same")

    first = await asyncio.gather(*uploads.submit([upload_file]))
    second = await asyncio.gather(*uploads.submit([upload_file]))
    await uploads.aclose()

    assert len(requests) == 2
    assert first[0] is not second[0]


@pytest.mark.asyncio
async def test_from_path_reads_file_contents(renderer, config, tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(b"\x89PNG data")
    requests = []
    uploads = _coordinator(renderer, config, _ok(requests))

    upload_file = UploadFile.from_path(path)
    assert upload_file.name == "photo.png"
    assert upload_file.size == len(b"\x89PNG data")

    await asyncio.gather(*uploads.submit([upload_file]))
    await uploads.aclose()
    assert b"\x89PNG data" in requests[0].read()


@pytest.mark.asyncio
async def test_mixed_batch_rejects_only_oversized_file(renderer, config):
    requests = []
    uploads = _coordinator(renderer, config, _ok(requests))

    tasks = uploads.submit(
        [UploadFile("small.txt", 1, b"a"), UploadFile("huge.bin", MAX_UPLOAD_SIZE + 1, b"x")]
    )
    await asyncio.gather(*tasks)
    await uploads.aclose()

    assert len(tasks) == 1
    assert len(requests) == 1
    assert renderer.kinds == [RenderKind.ERROR]


@pytest.mark.asyncio
async def test_unexpected_transport_failure_is_reported(renderer, config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("transport blew up")

    progress = UploadProgress()
    uploads = _coordinator(renderer, config, handler, progress=progress)
    (task,) = await asyncio.gather(*uploads.submit([UploadFile("a.txt", 1, b"a")]))
    await uploads.aclose()

    assert task.state is UploadState.FAILED
    assert not progress.visible
    kind, payload = renderer.calls[0]
    assert kind is RenderKind.ERROR
    assert "transport error" in payload["text"].lower()
    assert payload["color"] == ALARM_COLOR
