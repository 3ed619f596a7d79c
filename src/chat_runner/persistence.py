import json
from typing import Any, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from chat_runner.models import ChatEntry
from chat_runner.settings import settings

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def build_engine(url: str):
    kwargs: Dict[str, Any] = {"echo": False, "connect_args": {"check_same_thread": False}}
    if url in _MEMORY_URLS:
        # one shared connection, otherwise every session sees an empty DB
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = build_engine(settings.sqlite_url)


def init_db(bind=None):
    SQLModel.metadata.create_all(bind or engine)


class ChatHistory:
    def __init__(self, bind=None):
        self.engine = bind or engine

    def get_session(self):
        return Session(self.engine)

    def add(self, role: str, text: str, result: Optional[Dict[str, Any]] = None) -> ChatEntry:
        entry = ChatEntry(role=role, text=text, result_json=json.dumps(result) if result is not None else None)
        with self.get_session() as s:
            s.add(entry); s.commit(); s.refresh(entry)
            return entry

    def entries(self) -> List[ChatEntry]:
        with self.get_session() as s:
            return list(s.exec(select(ChatEntry).order_by(ChatEntry.id)).all())

    def clear(self) -> None:
        with self.get_session() as s:
            s.execute(delete(ChatEntry)); s.commit()

    def to_markdown(self) -> str:
        lines: List[str] = ["# Playwright Chat Runner - Export\n"]
        for entry in self.entries():
            if entry.role == "user":
                lines.append(f"## User\n\n{entry.text}\n")
            elif entry.role == "llm":
                lines.append(f"## Assistant\n\n{entry.text}\n")
            elif entry.role == "result" and entry.result_json:
                pretty = json.dumps(json.loads(entry.result_json), indent=2)
                lines.append(f"## Execution Result\n\n```json\n{pretty}\n```\n")
        return "\n".join(lines)
