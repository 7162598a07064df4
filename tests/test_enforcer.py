import pytest

from romplan.core.errors import SchemaViolation
from romplan.llm.schemas import Plan
from romplan.pipeline.enforcer import DEFAULT_EXAMPLE, DEFAULT_INSTRUCTION, normalize

from fakes import SAMPLE_PLAN


def test_valid_plan_passes_through():
    plan = normalize(SAMPLE_PLAN)
    assert isinstance(plan, Plan)
    assert plan.model_dump() == SAMPLE_PLAN


def test_missing_narrative_fields_are_repaired():
    plan = normalize({
        "goal": "G",
        "phases": [{"title": "P", "tasks": [{"task_id": "a", "instruction": "", "example": None}]}],
    })
    task = plan.phases[0].tasks[0]
    assert task.instruction == DEFAULT_INSTRUCTION
    assert task.example == DEFAULT_EXAMPLE


def test_tasks_default_to_empty():
    plan = normalize({"goal": "G", "phases": [{"title": "P"}]})
    assert plan.phases[0].tasks == []


def test_empty_phases_allowed():
    plan = normalize({"goal": "X", "phases": []})
    assert plan.goal == "X"
    assert plan.phases == []


@pytest.mark.parametrize("candidate", [
    {"phases": []},
    {"goal": "", "phases": []},
    {"goal": "   ", "phases": []},
    {"goal": 42, "phases": []},
    {"goal": "G", "phases": "step one"},
    {"goal": "G", "phases": {"title": "P"}},
    {"goal": "G", "phases": ["not a phase"]},
    {"goal": "G", "phases": [{"title": "P", "tasks": "x"}]},
    {"goal": "G", "phases": [{"title": "P", "tasks": ["x"]}]},
    ["goal", "phases"],
])
def test_structural_violations_rejected(candidate):
    with pytest.raises(SchemaViolation):
        normalize(candidate)


def test_task_ids_generated_and_deduplicated():
    plan = normalize({
        "goal": "G",
        "phases": [
            {"title": "A", "tasks": [{"task_id": "T"}, {"task_id": "T"}, {}]},
            {"title": "B", "tasks": [{"task_id": "T"}]},
        ],
    })
    ids = [t.task_id for p in plan.phases for t in p.tasks]
    assert ids == ["T", "T-2", "P1T3", "T-3"]


def test_reversed_dates_are_swapped():
    plan = normalize({
        "goal": "G",
        "phases": [{"title": "A", "tasks": [{"task_id": "a", "start_date": "2026-02-01", "end_date": "2026-01-01"}]}],
    })
    task = plan.phases[0].tasks[0]
    assert (task.start_date, task.end_date) == ("2026-01-01", "2026-02-01")


def test_non_iso_dates_kept_verbatim():
    plan = normalize({
        "goal": "G",
        "phases": [{"title": "A", "tasks": [{"task_id": "a", "start_date": "Week 2", "end_date": "Week 1"}]}],
    })
    assert plan.phases[0].tasks[0].start_date == "Week 2"


def test_normalize_is_idempotent():
    messy = {
        "goal": "  G  ",
        "phases": [
            {"tasks": [{"task_id": "x"}, {"task_id": "x", "start_date": "2026-03-01", "end_date": "2026-01-01"}]},
            {"title": "B", "tasks": None},
        ],
    }
    once = normalize(messy)
    assert normalize(once) == once
    assert normalize(once.model_dump()) == once
