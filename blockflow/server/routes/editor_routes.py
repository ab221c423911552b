"""
Editor REST routes — compile, diff, import and challenge checking for the
interactive code editor.

All routes are mounted under /api by main.py.  The diagram payloads are
accepted as arbitrary JSON and normalised permissively, so these endpoints
only fail (422) when the request envelope itself has the wrong shape.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel

from blockflow.challenge import check_answer
from blockflow.deserialiser import normalize
from blockflow.diff import diff_lines
from blockflow.emitter import emit
from blockflow.importer import parse_source_to_flow
from blockflow.scheduler import Scheduler

logger = logging.getLogger(__name__)

router = APIRouter()


# ── POST /compile ─────────────────────────────────────────────────────────────

class CompileBody(BaseModel):
    flow: Any = None


@router.post("/compile")
async def compile_flow(body: CompileBody) -> Dict[str, Any]:
    state = normalize(body.flow)
    schedule = Scheduler(state).build()
    logger.debug("compiling %d node(s), %d edge(s)", len(state.nodes), len(state.edges))
    return {
        "code": emit(schedule),
        "order": schedule.order,
        "unresolved": schedule.unresolved,
    }


# ── POST /diff ────────────────────────────────────────────────────────────────

class DiffBody(BaseModel):
    old: str = ""
    new: str = ""


@router.post("/diff")
async def diff(body: DiffBody) -> Dict[str, Any]:
    ops = diff_lines(body.old, body.new)
    return {"ops": [op.to_dict() for op in ops]}


# ── POST /import ──────────────────────────────────────────────────────────────

class ImportBody(BaseModel):
    code: str


@router.post("/import")
async def import_sketch(body: ImportBody) -> Dict[str, Any]:
    return parse_source_to_flow(body.code).to_dict()


# ── POST /check ───────────────────────────────────────────────────────────────

class CheckBody(BaseModel):
    flow: Any = None
    solution: Any = None


@router.post("/check")
async def check(body: CheckBody) -> Dict[str, Any]:
    return check_answer(body.flow, body.solution).to_dict()
