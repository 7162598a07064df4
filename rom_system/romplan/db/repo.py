# romplan/db/repo.py

import json
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from romplan.core.errors import PersistenceFailure
from romplan.core.logging import get_logger
from romplan.db.models import PlanRequest
from romplan.llm.schemas import Plan

log = get_logger("db.repo")


def _serialize_sqlite_value(value: Any) -> Any:
    """
    SQLite cannot bind dict/list directly into TEXT parameters.
    Convert dict/list to JSON string so commit never fails.
    """
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


def load_json(value: Optional[str], default: Any) -> Any:
    if not value:
        return default
    try:
        return json.loads(value)
    except ValueError:
        return default


async def _save(db: AsyncSession, req: PlanRequest) -> PlanRequest:
    req.phases = _serialize_sqlite_value(req.phases)
    req.result = _serialize_sqlite_value(req.result)
    try:
        db.add(req)
        await db.commit()
        await db.refresh(req)
    except SQLAlchemyError as e:
        await db.rollback()
        log.error(f"Request {req.id} write failed: {e}")
        raise PersistenceFailure(f"request {req.id} write failed: {e}") from e
    return req


async def create_request(db: AsyncSession, req: PlanRequest) -> PlanRequest:
    req.status = "generating"
    req.phases = []
    req.result = {}
    return await _save(db, req)


async def get_request(db: AsyncSession, request_id: str) -> PlanRequest | None:
    try:
        res = await db.execute(select(PlanRequest).where(PlanRequest.id == request_id))
    except SQLAlchemyError as e:
        raise PersistenceFailure(f"request {request_id} read failed: {e}") from e
    return res.scalar_one_or_none()


async def list_requests(db: AsyncSession, user_id: str) -> list[PlanRequest]:
    try:
        res = await db.execute(
            select(PlanRequest)
            .where(PlanRequest.user_id == user_id)
            .order_by(PlanRequest.created_at.desc())
        )
    except SQLAlchemyError as e:
        raise PersistenceFailure(f"request list for {user_id} failed: {e}") from e
    return list(res.scalars().all())


async def mark_complete(db: AsyncSession, req: PlanRequest, plan: Plan) -> PlanRequest:
    data = plan.model_dump()
    req.status = "complete"
    req.phases = data["phases"]
    req.result = data
    return await _save(db, req)


async def mark_failed(db: AsyncSession, req: PlanRequest, error: str, fallback: Plan) -> PlanRequest:
    req.status = "failed"
    req.phases = []
    req.result = {"error": error, "fallback": fallback.model_dump()}
    return await _save(db, req)


async def replace_plan(db: AsyncSession, req: PlanRequest, plan: Plan) -> PlanRequest:
    """User-edited plan from the dashboard; overwrites result and phases."""
    data = plan.model_dump()
    req.phases = data["phases"]
    req.result = data
    return await _save(db, req)
