"""Tests for chat_runner.agents: submit -> plan -> validate -> run -> summary."""

from __future__ import annotations

import asyncio
import json

from chat_runner.agents.automation import AutomationAgent
from chat_runner.agents.interpreter import InterpreterAgent, format_results
from chat_runner.models import ExecutionResult
from chat_runner.persistence import ChatHistory

from conftest import FailingLLM, FakeLLM, FakeRunner

PLAN = {"steps": [{"action": "goto", "url": "https://example.com"}, {"action": "snapshotText"}]}
RESULTS = [
    ExecutionResult(action="goto", success=True),
    ExecutionResult(action="snapshotText", success=True, data="Example Domain"),
]


def _agent(history: ChatHistory, llm, runner=None, tools=()) -> AutomationAgent:
    return AutomationAgent(history=history, llm=llm, runner=runner or FakeRunner(RESULTS), enabled_tools=tools)


class TestAutomationAgent:
    def test_runs_valid_plan_and_summarizes(self, history: ChatHistory) -> None:
        llm = FakeLLM(json.dumps(PLAN), "Opened example.com and read the page.")
        runner = FakeRunner(RESULTS)
        reply = asyncio.run(_agent(history, llm, runner).run({"task": "read example.com"}))

        assert reply == {
            "type": "results",
            "results": [
                {"action": "goto", "success": True},
                {"action": "snapshotText", "success": True, "data": "Example Domain"},
            ],
            "summary": "Opened example.com and read the page.",
        }
        assert [s.action for s in runner.plans[0].steps] == ["goto", "snapshotText"]
        assert [e.role for e in history.entries()] == ["user", "llm", "result", "result", "llm"]

    def test_user_request_and_tools_are_sent_to_model(self, history: ChatHistory) -> None:
        llm = FakeLLM('{"clarification": "Which site?"}')
        asyncio.run(_agent(history, llm, tools=["goto"]).run({"task": "open it"}))

        system, user = llm.requests[0]
        assert "goto:" in system["content"] and "clickText" not in system["content"]
        assert user["content"] == "User request: open it"

    def test_clarification_is_not_executed(self, history: ChatHistory) -> None:
        runner = FakeRunner()
        reply = asyncio.run(_agent(history, FakeLLM('{"clarification": "Which site?"}'), runner).run({"task": "go"}))

        assert reply == {"type": "clarification", "text": "Which site?"}
        assert runner.plans == []
        assert history.entries()[-1].text == "Which site?"

    def test_invalid_plan_reports_errors_without_running(self, history: ChatHistory) -> None:
        runner = FakeRunner()
        llm = FakeLLM('{"steps": [{"action": "goto", "url": "https://example.com"}]}')
        reply = asyncio.run(_agent(history, llm, runner, tools=["clickText"]).run({"task": "go"}))

        assert reply["type"] == "invalid_plan"
        assert "not in the enabled tools list" in reply["errors"][0]
        assert runner.plans == []
        assert history.entries()[-1].text.startswith("Invalid action plan:\nStep 0:")

    def test_model_failure_becomes_error_reply(self, history: ChatHistory) -> None:
        reply = asyncio.run(_agent(history, FailingLLM()).run({"task": "go"}))

        assert reply == {"type": "error", "error": "model unavailable"}
        assert history.entries()[-1].text == "Error: model unavailable"

    def test_empty_selection_enables_everything(self, history: ChatHistory) -> None:
        agent = _agent(history, FakeLLM())
        assert len(agent.active_tools) == 8
        agent.set_enabled_tools(["goto"])
        assert agent.active_tools == ["goto"]


class TestInterpreterAgent:
    def test_format_results(self) -> None:
        text = format_results(RESULTS + [ExecutionResult(action="clickText", success=False, error="Timeout")])
        assert text.splitlines() == [
            "goto: success",
            "snapshotText: success Example Domain",
            "clickText: failed  Timeout",
        ]

    def test_nothing_executed_skips_model(self) -> None:
        llm = FakeLLM()
        assert asyncio.run(InterpreterAgent(llm).run({"results": []})) == "No steps were executed."
        assert llm.requests == []
