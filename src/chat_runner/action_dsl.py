"""Action vocabulary and plan validation.

The validator is the only place where untrusted JSON (usually a language
model reply) becomes a typed ``ActionPlan``. It never raises for bad
input; every defect across every step is reported in one pass so the
caller can fix them all at once.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from chat_runner.models import ActionPlan, ValidationResult

AVAILABLE_TOOLS: Tuple[str, ...] = (
    "goto",
    "clickText",
    "type",
    "waitForText",
    "extractText",
    "snapshotText",
    "screenshot",
    "closeBrowser",
)

TOOL_DESCRIPTIONS: Dict[str, str] = {
    "goto": 'goto: { "action": "goto", "url": "<string>" } - Navigate to a URL',
    "clickText": 'clickText: { "action": "clickText", "text": "<string>" } - Click element by visible text',
    "type": 'type: { "action": "type", "selector": "<string>", "value": "<string>" } - Type into an element',
    "waitForText": 'waitForText: { "action": "waitForText", "text": "<string>" } - Wait for text to appear',
    "extractText": 'extractText: { "action": "extractText", "selector": "<string>" } - Extract text from element',
    "snapshotText": 'snapshotText: { "action": "snapshotText" } - Get all visible text from page body',
    "screenshot": 'screenshot: { "action": "screenshot", "name": "<string>" } - Take a screenshot',
    "closeBrowser": 'closeBrowser: { "action": "closeBrowser" } - Close the browser',
}

# action -> ((field, must_be_non_empty), ...)
REQUIRED_FIELDS: Dict[str, Tuple[Tuple[str, bool], ...]] = {
    "goto": (("url", True),),
    "clickText": (("text", True),),
    "type": (("selector", True), ("value", False)),
    "waitForText": (("text", True),),
    "extractText": (("selector", True),),
    "snapshotText": (),
    "screenshot": (("name", True),),
    "closeBrowser": (),
}


def describe_tools(enabled_tools: Sequence[str] = ()) -> str:
    """One line per tool, in the order given (all tools when empty)."""
    tools = list(enabled_tools) or list(AVAILABLE_TOOLS)
    return "\n".join(TOOL_DESCRIPTIONS.get(t, t) for t in tools)


def _validate_step(step: Any, index: int, enabled_tools: Sequence[str]) -> List[str]:
    if not isinstance(step, dict):
        return [f"Step {index}: must be an object"]

    action = step.get("action")
    if not isinstance(action, str):
        return [f'Step {index}: "action" must be a string']

    if action not in enabled_tools:
        if action not in REQUIRED_FIELDS:
            return [f'Step {index}: unknown action "{action}" (not in the enabled tools list)']
        return [f'Step {index}: action "{action}" is not in the enabled tools list']

    if action not in REQUIRED_FIELDS:
        return [f'Step {index}: unknown action "{action}"']

    errors: List[str] = []
    for field, non_empty in REQUIRED_FIELDS[action]:
        value = step.get(field)
        if not isinstance(value, str) or (non_empty and not value):
            qualifier = "non-empty " if non_empty else ""
            errors.append(f'Step {index}: "{action}" requires a {qualifier}"{field}" string')
    return errors


def validate_action_plan(raw: Any, enabled_tools: Sequence[str] = AVAILABLE_TOOLS) -> ValidationResult:
    """Check an untrusted ``{"steps": [...]}`` value against the enabled tools.

    Returns ``ValidationResult(valid=True, plan=...)`` when every step is
    well formed, otherwise ``valid=False`` with one message per violated
    constraint, formatted ``Step <index>: <message>``.
    """
    if not isinstance(raw, dict):
        return ValidationResult(valid=False, errors=["Plan must be a JSON object"])

    steps = raw.get("steps")
    if not isinstance(steps, (list, tuple)):
        return ValidationResult(valid=False, errors=['"steps" must be an array'])

    errors: List[str] = []
    for i, step in enumerate(steps):
        errors.extend(_validate_step(step, i, enabled_tools))

    if errors:
        return ValidationResult(valid=False, errors=errors)

    return ValidationResult(valid=True, plan=ActionPlan.model_validate({"steps": steps}))
