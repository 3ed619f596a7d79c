
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field
from sqlmodel import SQLModel, Field as SQLField


# --------- Action steps (one model per action kind) ---------
class _Step(BaseModel):
    model_config = {"frozen": True}


class GotoStep(_Step):
    action: Literal["goto"] = "goto"
    url: str


class ClickTextStep(_Step):
    action: Literal["clickText"] = "clickText"
    text: str


class TypeStep(_Step):
    action: Literal["type"] = "type"
    selector: str
    value: str


class WaitForTextStep(_Step):
    action: Literal["waitForText"] = "waitForText"
    text: str


class ExtractTextStep(_Step):
    action: Literal["extractText"] = "extractText"
    selector: str


class SnapshotTextStep(_Step):
    action: Literal["snapshotText"] = "snapshotText"


class ScreenshotStep(_Step):
    action: Literal["screenshot"] = "screenshot"
    name: str


class CloseBrowserStep(_Step):
    action: Literal["closeBrowser"] = "closeBrowser"


ActionStep = Annotated[
    Union[
        GotoStep,
        ClickTextStep,
        TypeStep,
        WaitForTextStep,
        ExtractTextStep,
        SnapshotTextStep,
        ScreenshotStep,
        CloseBrowserStep,
    ],
    Field(discriminator="action"),
]


class ActionPlan(BaseModel):
    model_config = {"frozen": True}

    steps: Tuple[ActionStep, ...] = ()


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    plan: Optional[ActionPlan] = None


class ExecutionResult(BaseModel):
    action: str
    success: bool
    data: Optional[str] = None
    error: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        """Serialize without the unset ``data``/``error`` keys."""
        return self.model_dump(exclude_none=True)


# --------- Chat transcript ---------
class ChatEntry(SQLModel, table=True):
    id: Optional[int] = SQLField(default=None, primary_key=True)
    role: str = SQLField(index=True)  # user | llm | result
    text: str
    result_json: Optional[str] = None
    created_at: datetime = SQLField(default_factory=lambda: datetime.now(timezone.utc))
