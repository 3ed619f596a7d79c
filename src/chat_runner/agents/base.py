from typing import Any, Dict, Optional


class Agent:
    name: str = "base"
    description: str = "Base agent"

    def __init__(self, llm: Optional[Any] = None):
        self._llm = llm

    @property
    def llm(self):
        # built lazily so the HTTP app can start without model credentials
        if self._llm is None:
            from chat_runner.llm import build_chat_llm
            self._llm = build_chat_llm()
        return self._llm

    @llm.setter
    def llm(self, value):
        self._llm = value

    async def ask(self, system_prompt: str, user_text: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_text},
        ]
        # LangChain chat models return a message; plain callables may return str
        resp = await self.llm.ainvoke(messages)
        return str(getattr(resp, "content", resp)).strip()

    async def run(self, context: Dict[str, Any]):
        raise NotImplementedError("Agent must implement run()")
