"""
Prompt text for every model call site:
- Template request (few-shot example plans)
- Trend request (short topical snippets)
- Plan prompt: system schema rule + few-shot examples + trend context

Nothing here is random; identical inputs give byte-identical prompts.
"""


import json
from typing import List, Sequence

from romplan.llm.schemas import Plan, PromptBlock, TrendSnippet

TEMPLATE_SEPARATOR = "\n---\n"

PLAN_SCHEMA = """{
  "goal": "string",
  "phases": [
    {
      "title": "string",
      "tasks": [
        {
          "task_id": "string",
          "title": "string",
          "owner": "string",
          "start_date": "YYYY-MM-DD",
          "end_date": "YYYY-MM-DD",
          "success_metric": "string",
          "instruction": "string",
          "example": "string"
        }
      ]
    }
  ]
}"""

PLAN_SYSTEM = """You are a startup execution planner.

Output ONLY JSON, no prose. The JSON is a plan for: "{need}"

It MUST match exactly this schema:
{schema}

Rules:
- goal is a non-empty string.
- phases is an ordered array; every task has ALL fields above.
- task_id is unique within the plan.
- start_date <= end_date, ISO dates.
- instruction says how to do the task; example gives one concrete example.
- Use the example plans (assistant message) as templates.
- Incorporate the trends (user message) where relevant.
"""

QUICK_TIP_SYSTEM = """You are a startup execution planner.

Output ONLY JSON, no prose. The request is narrow: "{need}"
Answer with a single quick tip, matching exactly this schema:
{{"goal": "string (the tip)", "phases": []}}
"""

TEMPLATES_INSTRUCTION = (
    'Generate {k} example JSON plan templates for: "{query}". '
    "Format as array of objects with goal and phases (2 phases, 2 tasks each). "
    "Each task has task_id, title, owner, start_date, end_date, success_metric, instruction, example. "
    "Return ONLY the JSON array."
)

TRENDS_INSTRUCTION = (
    "Generate {top_n} recent trends for: {keywords}. "
    'Format as array [{{"title": "string", "summary": "short desc", "url": "optional", "date": "optional"}}]. '
    "Return ONLY the JSON array."
)


def _dump(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def build_templates_prompt(query: str, k: int) -> List[PromptBlock]:
    return [PromptBlock(role="user", content=TEMPLATES_INSTRUCTION.format(k=k, query=query))]


def build_trends_prompt(keywords: Sequence[str], top_n: int) -> List[PromptBlock]:
    content = TRENDS_INSTRUCTION.format(top_n=top_n, keywords=", ".join(keywords))
    return [PromptBlock(role="user", content=content)]


def build_plan_prompt(
    templates: Sequence[Plan],
    trends: Sequence[TrendSnippet],
    need: str,
    *,
    quick_tip: bool = False,
) -> List[PromptBlock]:
    """
    Exactly three blocks, in order: system (schema + JSON-only rule),
    assistant (serialized templates joined by TEMPLATE_SEPARATOR),
    user (serialized trend list).
    """
    if quick_tip:
        system = QUICK_TIP_SYSTEM.format(need=need)
    else:
        system = PLAN_SYSTEM.format(need=need, schema=PLAN_SCHEMA)
    few_shot = TEMPLATE_SEPARATOR.join(_dump(t.model_dump()) for t in templates)
    user = f"Trends: {_dump([t.model_dump(exclude_none=True) for t in trends])}"

    return [
        PromptBlock(role="system", content=system),
        PromptBlock(role="assistant", content=few_shot),
        PromptBlock(role="user", content=user),
    ]
