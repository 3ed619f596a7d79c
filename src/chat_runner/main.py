
import logging
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from chat_runner.action_dsl import AVAILABLE_TOOLS, TOOL_DESCRIPTIONS, validate_action_plan
from chat_runner.agents.automation import AutomationAgent
from chat_runner.persistence import ChatHistory, init_db
from chat_runner.settings import settings

logger = logging.getLogger(__name__)

app = FastAPI(title="Playwright Chat Runner")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()
automation = AutomationAgent(history=ChatHistory())


class ToolsPayload(BaseModel):
    enabled_tools: List[str]


class SubmitPayload(BaseModel):
    text: str


class LoadPayload(BaseModel):
    content: str


class PlanPayload(BaseModel):
    plan: Any = None
    enabled_tools: Optional[List[str]] = None


@app.get("/tools")
async def list_tools():
    return {
        "available": list(AVAILABLE_TOOLS),
        "enabled": automation.active_tools,
        "descriptions": TOOL_DESCRIPTIONS,
    }


@app.put("/tools")
async def update_tools(payload: ToolsPayload):
    automation.set_enabled_tools(payload.enabled_tools)
    return {"enabled": automation.active_tools}


@app.post("/submit")
async def submit(payload: SubmitPayload) -> Dict[str, Any]:
    return await automation.run({"task": payload.text})


@app.post("/load")
async def load_instructions(payload: LoadPayload) -> Dict[str, Any]:
    # instructions file content, processed like a typed message
    return await automation.run({"task": payload.content})


@app.post("/validate")
async def validate(payload: PlanPayload):
    tools = AVAILABLE_TOOLS if payload.enabled_tools is None else payload.enabled_tools
    return validate_action_plan(payload.plan, tools).model_dump(exclude_none=True)


@app.post("/execute")
async def execute(payload: PlanPayload):
    tools = AVAILABLE_TOOLS if payload.enabled_tools is None else payload.enabled_tools
    validation = validate_action_plan(payload.plan, tools)
    if not validation.valid or validation.plan is None:
        raise HTTPException(status_code=422, detail={"errors": validation.errors})
    results = await automation.runner.execute_plan(validation.plan)
    return {"results": [r.to_wire() for r in results]}


@app.get("/export", response_class=PlainTextResponse)
async def export_history():
    return PlainTextResponse(automation.history.to_markdown(), media_type="text/markdown")


@app.delete("/history")
async def clear_history():
    automation.history.clear()
    return {"ok": True}


def run():
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Playwright Chat Runner on %s:%d", settings.host, settings.port)
    uvicorn.run("chat_runner.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
