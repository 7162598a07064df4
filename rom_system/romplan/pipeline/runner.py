"""
Drives one plan request through its lifecycle.
What it does:
- Inserts the request row as "generating"
- Runs the plan pipeline (which never raises)
- Writes "complete" + plan, or "failed" + {error, fallback}

Store failures propagate as PersistenceFailure; the caller reports them.
"""


from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from romplan.core.errors import InputInvalid
from romplan.core.logging import get_logger
from romplan.db.models import PlanRequest, new_request_id
from romplan.db.repo import create_request, mark_complete, mark_failed
from romplan.pipeline.planner import PlanPipeline

log = get_logger("pipeline.runner")


async def run_plan_request(
    db: AsyncSession,
    pipeline: PlanPipeline,
    *,
    user_id: str,
    need: str,
    file_url: Optional[str] = None,
) -> PlanRequest:
    if not need or not need.strip():
        raise InputInvalid("need text is empty")

    req = await create_request(db, PlanRequest(id=new_request_id(), user_id=user_id, need=need, file_url=file_url))
    log.info(f"Request {req.id}: generating")

    outcome = await pipeline.generate_plan(need)

    if outcome.used_fallback:
        log.warning(f"Request {req.id}: failed ({outcome.error}), fallback stored")
        return await mark_failed(db, req, outcome.error, outcome.plan)

    log.info(f"Request {req.id}: complete")
    return await mark_complete(db, req, outcome.plan)
