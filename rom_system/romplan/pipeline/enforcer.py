"""
Schema enforcement for model-produced plans.

Structural fields (goal, phases, phase/task shape) are load-bearing and a
violation raises SchemaViolation. Narrative fields are repaired:
instruction/example get generic defaults, missing task_ids are generated,
duplicate ones are suffixed, reversed ISO date ranges are swapped.
normalize(normalize(x)) == normalize(x).
"""


from datetime import date
from typing import Any, List, Set, Tuple

from romplan.core.errors import SchemaViolation
from romplan.llm.schemas import Phase, Plan, Task

DEFAULT_INSTRUCTION = "Follow standard process."
DEFAULT_EXAMPLE = "E.g., survey 50 leads."


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _as_date(value: str):
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _ordered_dates(start: str, end: str) -> Tuple[str, str]:
    d1, d2 = _as_date(start), _as_date(end)
    if d1 and d2 and d1 > d2:
        return end, start
    return start, end


def _unique_id(task_id: str, seen: Set[str]) -> str:
    if task_id not in seen:
        return task_id
    n = 2
    while f"{task_id}-{n}" in seen:
        n += 1
    return f"{task_id}-{n}"


def _task(raw: Any, phase_no: int, task_no: int, seen: Set[str]) -> Task:
    if not isinstance(raw, dict):
        raise SchemaViolation(f"phase {phase_no} task {task_no} is not an object")

    task_id = _unique_id(_text(raw.get("task_id")) or f"P{phase_no}T{task_no}", seen)
    seen.add(task_id)
    start, end = _ordered_dates(_text(raw.get("start_date")), _text(raw.get("end_date")))

    return Task(
        task_id=task_id,
        title=_text(raw.get("title")),
        owner=_text(raw.get("owner")),
        start_date=start,
        end_date=end,
        success_metric=_text(raw.get("success_metric")),
        instruction=_text(raw.get("instruction")) or DEFAULT_INSTRUCTION,
        example=_text(raw.get("example")) or DEFAULT_EXAMPLE,
    )


def _phase(raw: Any, phase_no: int, seen: Set[str]) -> Phase:
    if not isinstance(raw, dict):
        raise SchemaViolation(f"phase {phase_no} is not an object")

    tasks = raw.get("tasks")
    if tasks is None:
        tasks = []
    if not isinstance(tasks, list):
        raise SchemaViolation(f"phase {phase_no} tasks is not a list (got {type(tasks).__name__})")

    return Phase(
        title=_text(raw.get("title")) or f"Phase {phase_no}",
        tasks=[_task(t, phase_no, i, seen) for i, t in enumerate(tasks, start=1)],
    )


def normalize(candidate: Any) -> Plan:
    if isinstance(candidate, Plan):
        candidate = candidate.model_dump()
    if not isinstance(candidate, dict):
        raise SchemaViolation(f"plan is not an object (got {type(candidate).__name__})")

    goal = candidate.get("goal")
    if not isinstance(goal, str) or not goal.strip():
        raise SchemaViolation("plan goal is missing or empty")

    phases = candidate.get("phases")
    if phases is None:
        phases = []
    if not isinstance(phases, list):
        raise SchemaViolation(f"plan phases is not a list (got {type(phases).__name__})")

    seen: Set[str] = set()
    normalized: List[Phase] = [_phase(p, i, seen) for i, p in enumerate(phases, start=1)]
    return Plan(goal=goal.strip(), phases=normalized)
