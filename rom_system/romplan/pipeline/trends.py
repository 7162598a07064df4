"""
Trend retrieval: k short topical snippets for the extracted keywords.
Same degradation rule as templates: unparseable output means no trends.
"""


from typing import List, Sequence

from pydantic import ValidationError

from romplan.core.errors import MalformedJson, NoJsonFound
from romplan.core.logging import get_logger, safe_snippet
from romplan.llm.json_parse import extract_json
from romplan.llm.prompts import build_trends_prompt
from romplan.llm.schemas import TrendSnippet

log = get_logger("pipeline.trends")


class TrendRetriever:
    def __init__(self, invoker, *, max_tokens: int = 200):
        self.invoker = invoker
        self.max_tokens = max_tokens

    async def fetch_trends(self, keywords: Sequence[str], top_n: int) -> List[TrendSnippet]:
        if top_n <= 0:
            return []

        text = await self.invoker.invoke(build_trends_prompt(keywords, top_n), max_tokens=self.max_tokens)
        try:
            raw = extract_json(text, mode="array")
        except (NoJsonFound, MalformedJson) as e:
            log.warning(f"Trend parse failed: {e}. Snippet={safe_snippet(text)}")
            return []

        trends: List[TrendSnippet] = []
        for item in raw:
            try:
                trends.append(TrendSnippet.model_validate(item))
            except ValidationError:
                log.warning(f"Dropping trend entry: {safe_snippet(str(item), 120)}")
                continue
            if len(trends) >= top_n:
                break
        return trends
