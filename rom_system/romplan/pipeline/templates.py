"""
Template retrieval (stand-in for a similarity index).
Asks the model for k example plans in the request's domain and keeps the
ones that survive schema enforcement. A garbled answer yields no
templates; that only weakens the few-shot context.
"""


from typing import List

from romplan.core.errors import MalformedJson, NoJsonFound, SchemaViolation
from romplan.core.logging import get_logger, safe_snippet
from romplan.llm.json_parse import extract_json
from romplan.llm.prompts import build_templates_prompt
from romplan.llm.schemas import TemplateExample
from romplan.pipeline.enforcer import normalize

log = get_logger("pipeline.templates")


class TemplateRetriever:
    def __init__(self, invoker, *, max_tokens: int = 300):
        self.invoker = invoker
        self.max_tokens = max_tokens

    async def fetch_templates(self, query: str, k: int) -> List[TemplateExample]:
        if k <= 0:
            return []

        text = await self.invoker.invoke(build_templates_prompt(query, k), max_tokens=self.max_tokens)
        try:
            raw = extract_json(text, mode="array")
        except (NoJsonFound, MalformedJson) as e:
            log.warning(f"Template parse failed: {e}. Snippet={safe_snippet(text)}")
            return []

        templates: List[TemplateExample] = []
        for item in raw:
            try:
                templates.append(normalize(item))
            except SchemaViolation as e:
                log.warning(f"Dropping template: {e}")
                continue
            if len(templates) >= k:
                break
        return templates
