from typing import Any, Dict, List

from chat_runner.agents.base import Agent
from chat_runner.models import ExecutionResult


def format_results(results: List[ExecutionResult]) -> str:
    return "\n".join(
        f"{r.action}: {'success' if r.success else 'failed'} {r.data or ''} {r.error or ''}".rstrip()
        for r in results
    )


class InterpreterAgent(Agent):
    name = "interpreter"
    description = "Summarizes what an executed plan did"

    async def run(self, context: Dict[str, Any]) -> str:
        """Ask the model for a brief summary of executed steps."""
        results: List[ExecutionResult] = context.get("results") or []
        if not results:
            return "No steps were executed."

        prompt = (
            f"The following Playwright steps were executed:\n{format_results(results)}\n"
            "Please provide a brief summary of what happened."
        )
        return await self.ask(context.get("system_prompt") or "", prompt)
