import pytest
from sqlalchemy.exc import OperationalError

from romplan.core.errors import BackendUnavailable, InputInvalid, PersistenceFailure
from romplan.db.repo import get_request, list_requests, load_json, replace_plan
from romplan.pipeline.enforcer import normalize
from romplan.pipeline.fallback import fallback_plan
from romplan.pipeline.planner import PlanPipeline
from romplan.pipeline.runner import run_plan_request

from fakes import SAMPLE_PLAN, RoutedInvoker, dumps, make_settings

NEED = "Grow my B2B sales pipeline"


def _pipeline(invoker):
    return PlanPipeline(invoker, settings=make_settings(), retry_backoff=0)


@pytest.mark.asyncio
async def test_success_marks_complete(db):
    pipeline = _pipeline(RoutedInvoker(plan=dumps(SAMPLE_PLAN)))
    req = await run_plan_request(db, pipeline, user_id="user_1", need=NEED, file_url="https://files/x.csv")

    stored = await get_request(db, req.id)
    assert stored.status == "complete"
    assert stored.file_url == "https://files/x.csv"
    assert load_json(stored.result, {}) == SAMPLE_PLAN
    assert load_json(stored.phases, []) == SAMPLE_PLAN["phases"]


@pytest.mark.asyncio
async def test_failure_marks_failed_with_fallback(db):
    pipeline = _pipeline(RoutedInvoker(plan=BackendUnavailable("down")))
    req = await run_plan_request(db, pipeline, user_id="user_1", need=NEED)

    stored = await get_request(db, req.id)
    result = load_json(stored.result, {})
    assert stored.status == "failed"
    assert load_json(stored.phases, None) == []
    assert result["error"].startswith("BackendUnavailable")
    assert result["fallback"] == fallback_plan(NEED).model_dump()


@pytest.mark.asyncio
async def test_empty_need_rejected_before_insert(db):
    invoker = RoutedInvoker()
    with pytest.raises(InputInvalid):
        await run_plan_request(db, _pipeline(invoker), user_id="user_1", need="  ")
    assert await list_requests(db, "user_1") == []
    assert invoker.calls == []


@pytest.mark.asyncio
async def test_store_failure_propagates(db, monkeypatch):
    async def broken_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(PersistenceFailure):
        await run_plan_request(db, _pipeline(RoutedInvoker()), user_id="user_1", need=NEED)


@pytest.mark.asyncio
async def test_list_newest_first_and_scoped_to_user(db):
    pipeline = _pipeline(RoutedInvoker(plan=dumps(SAMPLE_PLAN)))
    first = await run_plan_request(db, pipeline, user_id="user_1", need="first need")
    second = await run_plan_request(db, pipeline, user_id="user_1", need="second need")
    await run_plan_request(db, pipeline, user_id="user_2", need="other need")

    reqs = await list_requests(db, "user_1")
    assert [r.id for r in reqs] == [second.id, first.id]


@pytest.mark.asyncio
async def test_replace_plan_overwrites_result(db):
    req = await run_plan_request(db, _pipeline(RoutedInvoker(plan=dumps(SAMPLE_PLAN))), user_id="u", need=NEED)
    edited = normalize({"goal": "Edited", "phases": [{"title": "Only", "tasks": []}]})
    await replace_plan(db, req, edited)

    stored = await get_request(db, req.id)
    assert load_json(stored.result, {})["goal"] == "Edited"
    assert load_json(stored.phases, []) == [{"title": "Only", "tasks": []}]
