import asyncio
import json

import httpx
import pytest

from app.common.errors import ExecutionFailure
from app.features.execution.service import ExecutionService


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.text = json.dumps(payload)

    def json(self):
        return self._payload


def _service():
    service = ExecutionService()
    service.base_url = "http://piston.test/api/v2/piston"
    return service


def test_execute_posts_runtime_and_stdin(monkeypatch):
    service = _service()
    seen = {}

    async def fake_request(method, path, **kwargs):
        seen.update(method=method, path=path, body=kwargs["json"])
        return _FakeResponse({"language": "python", "version": "3.10.0", "run": {"stdout": "7\n", "stderr": "", "output": "7\n", "code": 0}})

    monkeypatch.setattr(service, "_request", fake_request)
    result = asyncio.run(service.execute("print(3+4)", "Python", "3\n4"))
    assert result.output == "7\n"
    assert result.exit_code == 0
    assert seen["method"] == "POST"
    assert seen["path"] == "/execute"
    assert seen["body"]["language"] == "python"
    assert seen["body"]["version"] == "3.10.0"
    assert seen["body"]["stdin"] == "3\n4"
    assert seen["body"]["files"] == [{"content": "print(3+4)"}]


def test_cpp_maps_to_piston_name():
    service = _service()
    assert service.resolve_runtime("cpp").language == "c++"


def test_unsupported_language_does_not_call_out(monkeypatch):
    service = _service()

    async def fake_request(method, path, **kwargs):  # pragma: no cover - must not run
        raise AssertionError("execution service called")

    monkeypatch.setattr(service, "_request", fake_request)
    with pytest.raises(ExecutionFailure) as excinfo:
        asyncio.run(service.execute("x", "cobol"))
    assert excinfo.value.code == "unsupported_language"
    assert excinfo.value.message == "Unsupported language: cobol"


def test_non_2xx_is_unavailable(monkeypatch):
    service = _service()

    async def fake_request(method, path, **kwargs):
        return _FakeResponse({"message": "rate limited"}, status_code=429)

    monkeypatch.setattr(service, "_request", fake_request)
    with pytest.raises(ExecutionFailure) as excinfo:
        asyncio.run(service.execute("x", "python"))
    assert excinfo.value.message == "Execution service unavailable"


def test_stderr_only_run_fails_with_stderr(monkeypatch):
    service = _service()

    async def fake_request(method, path, **kwargs):
        return _FakeResponse({"run": {"stdout": "", "stderr": "NameError: x", "output": "", "code": 1}})

    monkeypatch.setattr(service, "_request", fake_request)
    with pytest.raises(ExecutionFailure) as excinfo:
        asyncio.run(service.execute("x", "python"))
    assert excinfo.value.message == "NameError: x"


def test_missing_run_block(monkeypatch):
    service = _service()

    async def fake_request(method, path, **kwargs):
        return _FakeResponse({"compile": {"stderr": "boom"}})

    monkeypatch.setattr(service, "_request", fake_request)
    with pytest.raises(ExecutionFailure) as excinfo:
        asyncio.run(service.execute("x", "java"))
    assert excinfo.value.message == "No output received"


def test_timeout_becomes_execution_failure(monkeypatch):
    service = _service()
    monkeypatch.setattr(service.settings, "execution_timeout_s", 0.01)

    async def slow_request(method, path, **kwargs):
        await asyncio.sleep(1)

    monkeypatch.setattr(service, "_request", slow_request)
    with pytest.raises(ExecutionFailure) as excinfo:
        asyncio.run(service.execute("while True: pass", "python"))
    assert excinfo.value.code == "execution_timeout"
    assert excinfo.value.message.startswith("Execution timed out")


def test_connection_errors_retry_then_fail(monkeypatch):
    service = _service()
    monkeypatch.setattr(service.settings, "execution_max_retries", 2)
    attempts = []

    class _RefusingClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return False

        async def request(self, method, url, **kwargs):
            attempts.append(url)
            raise httpx.ConnectError("refused")

    async def no_sleep(_delay):
        return None

    monkeypatch.setattr("app.features.execution.service.httpx.AsyncClient", _RefusingClient)
    monkeypatch.setattr("app.features.execution.service.asyncio.sleep", no_sleep)
    with pytest.raises(ExecutionFailure) as excinfo:
        asyncio.run(service._request("POST", "/execute", json={}))
    assert excinfo.value.message == "Execution service unavailable"
    assert attempts == ["http://piston.test/api/v2/piston/execute"] * 2
