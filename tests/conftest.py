"""Test configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import httpx
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field
import pytest

from location_agent.config import Settings
from location_agent.tools.location_tools import make_location_tool
from location_agent.tools.search_tools import make_search_tool


class ScriptedChatModel(BaseChatModel):
    """Chat model returning canned messages in order, recording what it was sent.

    A response that is an exception instance is raised instead of returned.
    With cycle=True the script repeats forever.
    """

    responses: list[Any] = Field(default_factory=list)
    cycle: bool = False
    calls: list[list[BaseMessage]] = Field(default_factory=list)
    bound: list[tuple[list[Any], dict[str, Any]]] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def bind_tools(self, tools, **kwargs):  # type: ignore[override]
        self.bound.append((list(tools), kwargs))
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        index = len(self.calls)
        self.calls.append(list(messages))
        if self.cycle and self.responses:
            response = self.responses[index % len(self.responses)]
        elif index < len(self.responses):
            response = self.responses[index]
        else:
            msg = "scripted model ran out of responses"
            raise RuntimeError(msg)
        if isinstance(response, Exception):
            raise response
        return ChatResult(generations=[ChatGeneration(message=response.model_copy())])


def route(next_: str) -> AIMessage:
    """A supervisor reply choosing *next_* through the route tool."""
    return AIMessage(content="", tool_calls=[{"name": "route", "args": {"next": next_}, "id": "call_route"}])


def tool_call(name: str, call_id: str = "call_1", **args: Any) -> AIMessage:
    """A worker reply asking for one tool call."""
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


class StubTavilyClient:
    """Stands in for AsyncTavilyClient."""

    def __init__(self, results: list[dict[str, Any]] | None = None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.queries: list[tuple[str, dict[str, Any]]] = []

    async def search(self, query: str, **kwargs: Any) -> dict[str, Any]:
        self.queries.append((query, kwargs))
        if self.error is not None:
            raise self.error
        return {"query": query, "results": self.results}


SNIPPETS = [
    {"title": "Hotel guide", "url": "https://example.com/guide", "content": "The hotel sits by the harbour."},
    {"title": "Reviews", "url": "https://example.com/reviews", "content": "Guests praise the breakfast."},
    {"title": "History", "url": "https://example.com/history", "content": "Built in 1902 as a warehouse."},
]


@pytest.fixture
def settings() -> Settings:
    """Settings with fake secrets, ignoring any local .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        tripadvisor_api_key="ta-test",
        tavily_api_key="tvly-test",
    )


@pytest.fixture
def location_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def location_tool(settings, location_requests):
    """Location tool against a mock API answering with a fixed address."""

    def handler(request: httpx.Request) -> httpx.Response:
        location_requests.append(request)
        return httpx.Response(200, json={"location_id": "229968", "address": "123 Main St"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return make_location_tool(settings, client=client)


@pytest.fixture
def failing_location_tool(settings):
    """Location tool against a mock API that always answers HTTP 500."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500, text="oops")))
    return make_location_tool(settings, client=client)


@pytest.fixture
def tavily_client() -> StubTavilyClient:
    return StubTavilyClient(results=SNIPPETS)


@pytest.fixture
def search_tool(settings, tavily_client):
    return make_search_tool(settings, client=tavily_client)
