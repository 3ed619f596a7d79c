import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from chat_runner.action_dsl import AVAILABLE_TOOLS, validate_action_plan
from chat_runner.agents.base import Agent
from chat_runner.agents.interpreter import InterpreterAgent
from chat_runner.persistence import ChatHistory
from chat_runner.planner import build_system_prompt, parse_model_reply
from chat_runner.runner import PlaywrightRunner

logger = logging.getLogger(__name__)


class AutomationAgent(Agent):
    """Turns one chat message into a validated plan and runs it."""

    name = "automation"
    description = "Plans and executes browser actions from a chat message"

    def __init__(
        self,
        history: ChatHistory,
        llm: Optional[Any] = None,
        runner: Optional[PlaywrightRunner] = None,
        enabled_tools: Sequence[str] = (),
    ):
        super().__init__(llm)
        self.history = history
        self.runner = runner or PlaywrightRunner()
        self.enabled_tools: List[str] = list(enabled_tools)

    def set_enabled_tools(self, tools: Sequence[str]) -> None:
        self.enabled_tools = list(tools)

    @property
    def active_tools(self) -> List[str]:
        # no selection means everything is allowed
        return self.enabled_tools or list(AVAILABLE_TOOLS)

    async def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        text = (context.get("task") or "").strip()
        self.history.add("user", text)

        try:
            system_prompt = build_system_prompt(self.active_tools)
            reply = parse_model_reply(await self.ask(system_prompt, f"User request: {text}"))

            if reply.is_clarification:
                self.history.add("llm", reply.clarification)
                return {"type": "clarification", "text": reply.clarification}

            validation = validate_action_plan(reply.plan, self.active_tools)
            if not validation.valid or validation.plan is None:
                self.history.add("llm", "Invalid action plan:\n" + "\n".join(validation.errors))
                return {"type": "invalid_plan", "errors": validation.errors}

            self.history.add("llm", "Executing plan...")
            results = await self.runner.execute_plan(validation.plan)
            for r in results:
                payload = r.to_wire()
                self.history.add("result", json.dumps(payload), result=payload)

            interpreter = InterpreterAgent(self.llm)
            summary = await interpreter.run({"results": results, "system_prompt": system_prompt})
            self.history.add("llm", summary)
        except Exception as e:
            logger.exception("Chat request failed")
            msg = str(e) or e.__class__.__name__
            self.history.add("llm", f"Error: {msg}")
            return {"type": "error", "error": msg}

        return {
            "type": "results",
            "results": [r.to_wire() for r in results],
            "summary": summary,
        }
