from __future__ import annotations

from langchain_core.messages import AIMessage
import pytest
from typer.testing import CliRunner

import main
from location_agent.config import get_settings
from location_agent.graphs.location_graph import build_location_graph

from conftest import ScriptedChatModel, route


runner = CliRunner()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_run_without_configuration_exits_with_error(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("OPENAI_API_KEY", "TRIPADVISOR_API_KEY", "LLM_PROVIDER"):
        monkeypatch.delenv(name, raising=False)

    result = runner.invoke(main.app, ["What is the address?"])

    assert result.exit_code == 1


def _patch_graph(monkeypatch, settings, search_tool, location_tool, supervisor_llm, worker_llm):
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    monkeypatch.setattr(
        main,
        "build_location_graph",
        lambda _settings: build_location_graph(
            settings, llm=worker_llm, supervisor_llm=supervisor_llm, tools=(search_tool, location_tool)
        ),
    )


def test_run_prints_each_step_and_the_answer(monkeypatch, settings, search_tool, location_tool):
    _patch_graph(
        monkeypatch,
        settings,
        search_tool,
        location_tool,
        ScriptedChatModel(responses=[route("tripadvisorApi"), route("FINISH")]),
        ScriptedChatModel(responses=[AIMessage(content="123 Main St.")]),
    )

    result = runner.invoke(main.app, ["locationId: 229968, what is the address?"])

    assert result.exit_code == 0, result.output
    assert "supervisor -> tripadvisorApi" in result.output
    assert "=== Final Output ===\n123 Main St." in result.output


def test_run_reports_exhausted_budget(monkeypatch, settings, search_tool, location_tool):
    _patch_graph(
        monkeypatch,
        settings,
        search_tool,
        location_tool,
        ScriptedChatModel(responses=[route("researcher")], cycle=True),
        ScriptedChatModel(responses=[AIMessage(content="Still looking.")], cycle=True),
    )

    result = runner.invoke(main.app, ["Tell me everything.", "--step-budget", "2"])

    assert result.exit_code == 2
