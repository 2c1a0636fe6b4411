# tests/conftest.py
"""
Shared fixtures: a fake requests session so the client can be exercised
without a network, and helpers for writing rule files.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from correlation_sync.client import CorrelationClient


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    """
    Stand-in for requests.Session.

    `routes` maps a substring of the URL (e.g. "GetCorrelationList") to either
    a FakeResponse, an exception instance to raise, or a callable taking the
    JSON body and returning one of those.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = routes or {}
        self.headers: Dict[str, str] = {}
        self.verify = True
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, json: Any = None, timeout: Any = None, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        for key, handler in self.routes.items():
            if key in url:
                result = handler(json) if callable(handler) else handler
                if isinstance(result, Exception):
                    raise result
                return result
        raise AssertionError(f"unexpected POST to {url}")

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def make_client(fake_session: FakeSession) -> Callable[..., CorrelationClient]:
    def _make(**kwargs: Any) -> CorrelationClient:
        kwargs.setdefault("hostname", "siem.example.local")
        kwargs.setdefault("api_key", "secret-key")
        return CorrelationClient(session=fake_session, **kwargs)

    return _make


@pytest.fixture
def write_rule(tmp_path) -> Callable[..., str]:
    def _write(relpath: str, document: Any) -> str:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(document, str):
            path.write_text(document, encoding="utf-8")
        else:
            path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)

    return _write


def rule_document(name: str, **fields: Any) -> Dict[str, Any]:
    query = {
        "Name": name,
        "Description": f"{name} description",
        "Tags": ["edr"],
        "RiskLevel": 3,
        "ID": f"{name.lower()}-id",
        "Query": "select * from events",
    }
    query.update(fields)
    return {"query": query}


@pytest.fixture
def rule_doc() -> Callable[..., Dict[str, Any]]:
    return rule_document
