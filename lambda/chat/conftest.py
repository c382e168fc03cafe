import json

import pytest


class FakeUrlopenResponse:
    """urllib.request.urlopen 이 돌려주는 응답 객체 대역"""

    def __init__(self, body, status=200, read_error=None):
        self.status = status
        self._body = body if isinstance(body, bytes) else body.encode("utf-8")
        self._read_error = read_error

    def read(self):
        if self._read_error is not None:
            raise self._read_error
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeCompletionClient:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def complete(self, api_key, user_message):
        self.calls.append((api_key, user_message))
        if self.error is not None:
            raise self.error
        return self.content


def completion_body(content, usage=None):
    payload = {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}
    if usage is not None:
        payload["usage"] = usage
    return json.dumps(payload, ensure_ascii=False)


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test-key")
    return "sk-test-key"


@pytest.fixture(autouse=True)
def clean_deepseek_env(monkeypatch):
    for name in ("DEEPSEEK_API_KEY", "DEEPSEEK_API_URL", "DEEPSEEK_MODEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def post_event():
    def _build(body):
        if not isinstance(body, str) and body is not None:
            body = json.dumps(body)
        return {"httpMethod": "POST", "body": body}
    return _build


@pytest.fixture
def fake_client():
    return FakeCompletionClient


@pytest.fixture
def fake_urlopen(monkeypatch):
    """urlopen 을 대체하고 전달된 요청을 기록합니다. side_effect 는 응답 객체 또는 예외"""
    import deepseek_client

    captured = {}

    def _install(side_effect):
        def _urlopen(req, timeout=None):
            captured["request"] = req
            captured["timeout"] = timeout
            if isinstance(side_effect, BaseException):
                raise side_effect
            return side_effect

        monkeypatch.setattr(deepseek_client.urllib.request, "urlopen", _urlopen)
        return captured

    return _install


@pytest.fixture
def completion_response():
    def _build(content, status=200, usage=None):
        return FakeUrlopenResponse(completion_body(content, usage), status=status)
    return _build


@pytest.fixture
def raw_response():
    return FakeUrlopenResponse
