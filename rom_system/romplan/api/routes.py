"""
FastAPI routes for plan requests.
What it provides:
- Submit a need and generate its plan
- List a user's requests (newest first)
- Fetch one request
- Replace a stored plan with a user-edited one

And, the main purpose:
Expose the plan pipeline over HTTP.
"""


from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from romplan.api.types import CreatePlanRequest, UpdatePlanRequest
from romplan.core.errors import InputInvalid, PersistenceFailure, SchemaViolation
from romplan.db.models import PlanRequest
from romplan.db.repo import get_request, list_requests, load_json, replace_plan
from romplan.db.session import get_session
from romplan.pipeline.enforcer import normalize
from romplan.pipeline.planner import PlanPipeline
from romplan.pipeline.runner import run_plan_request

router = APIRouter()


def get_pipeline(request: Request) -> PlanPipeline:
    return request.app.state.pipeline


def _view(req: PlanRequest) -> dict:
    result = load_json(req.result, {})
    return {
        "id": req.id,
        "user_id": req.user_id,
        "need": req.need,
        "file_url": req.file_url,
        "status": req.status,
        "goal": result.get("goal") if req.status == "complete" else None,
        "phases": load_json(req.phases, []),
        "result": result,
        "created_at": req.created_at.isoformat() if req.created_at else None,
    }


async def _owned(db: AsyncSession, request_id: str, user_id: str) -> PlanRequest:
    req = await get_request(db, request_id)
    if not req:
        raise HTTPException(404, "request not found")
    if req.user_id != user_id:
        raise HTTPException(403, "user mismatch")
    return req


@router.post("/requests")
async def api_create_request(
    body: CreatePlanRequest,
    db: AsyncSession = Depends(get_session),
    pipeline: PlanPipeline = Depends(get_pipeline),
):
    try:
        req = await run_plan_request(
            db, pipeline, user_id=body.user_id, need=body.need, file_url=body.file_url
        )
    except InputInvalid as e:
        raise HTTPException(400, str(e))
    except PersistenceFailure as e:
        raise HTTPException(503, str(e))
    return _view(req)


@router.get("/requests")
async def api_list_requests(user_id: str, db: AsyncSession = Depends(get_session)):
    try:
        reqs = await list_requests(db, user_id)
    except PersistenceFailure as e:
        raise HTTPException(503, str(e))
    return [_view(r) for r in reqs]


@router.get("/requests/{request_id}")
async def api_get_request(request_id: str, user_id: str, db: AsyncSession = Depends(get_session)):
    try:
        req = await _owned(db, request_id, user_id)
    except PersistenceFailure as e:
        raise HTTPException(503, str(e))
    return _view(req)


@router.put("/requests/{request_id}/plan")
async def api_replace_plan(
    request_id: str,
    body: UpdatePlanRequest,
    db: AsyncSession = Depends(get_session),
):
    try:
        plan = normalize(body.plan)
    except SchemaViolation as e:
        raise HTTPException(422, str(e))

    try:
        req = await _owned(db, request_id, body.user_id)
        req = await replace_plan(db, req, plan)
    except PersistenceFailure as e:
        raise HTTPException(503, str(e))
    return _view(req)
