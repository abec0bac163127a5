"""Shared pytest fixtures for github-retrospect tests."""

from __future__ import annotations

import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


class FakeSearch:
    """In-memory ActivitySource; *responder* decides each page's items.

    A responder may return a list of items or an exception instance to raise.
    """

    def __init__(self, responder=None):
        self.responder = responder or (lambda target, query, page: [])
        self.calls: list[tuple[str, str, int, int]] = []

    async def search(self, target, query, *, page, per_page):
        self.calls.append((target, query, page, per_page))
        result = self.responder(target, query, page)
        if isinstance(result, BaseException):
            raise result
        return result


class RecordingBackoff:
    """Backoff policy that never sleeps, only records the pages it guarded."""

    def __init__(self):
        self.pages: list[int] = []

    async def wait(self, page):
        self.pages.append(page)


@pytest.fixture
def fake_search():
    return FakeSearch


@pytest.fixture
def backoff():
    return RecordingBackoff()
