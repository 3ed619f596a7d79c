from __future__ import annotations

import json
import re
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from chat_runner.action_dsl import describe_tools

_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n(.*?)\n?```$", flags=re.DOTALL)


class PlannerReply(BaseModel):
    """What the model answered: a candidate plan or a question back to the user."""
    clarification: Optional[str] = None
    plan: Any = None

    @property
    def is_clarification(self) -> bool:
        return self.clarification is not None


def build_system_prompt(enabled_tools: Sequence[str] = ()) -> str:
    """
    Construct a strict, JSON-only planning prompt listing exactly the enabled tools.
    """
    return (
        "You are a Playwright automation assistant.\n"
        'You MUST return ONLY valid JSON in this exact format: { "steps": [ ... ] }\n'
        'If you need clarification, return: { "clarification": "your question here" }\n'
        "Do NOT assume missing information. Ask before proceeding if unsure.\n"
        f"Available tools:\n{describe_tools(enabled_tools)}\n"
        "ONLY use tools from the available list above."
    )


def _strip_fence(text: str) -> str:
    # common case: the whole reply wrapped in a markdown code fence
    m = _FENCE.match(text)
    return m.group(1).strip() if m else text


def parse_model_reply(text: str) -> PlannerReply:
    """
    Classify a raw model reply. Only well-formed JSON can become a plan;
    anything else is shown to the user as a clarification.
    """
    text = (text or "").strip()
    try:
        parsed = json.loads(_strip_fence(text))
    except json.JSONDecodeError:
        return PlannerReply(clarification=text)

    if isinstance(parsed, dict) and "clarification" in parsed:
        return PlannerReply(clarification=str(parsed["clarification"]))
    return PlannerReply(plan=parsed)
