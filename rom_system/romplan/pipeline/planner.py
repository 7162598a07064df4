"""
Pipeline orchestrator.
What it does:
- Retrieves templates and trends for the need
- Builds the plan prompt and calls the model (one retry on backend failure)
- Extracts + enforces the plan
- On ANY failure returns the fallback plan and a diagnostic string

And, the main purpose:
Turn a free-text need into a plan, always.
"""


import asyncio
from typing import List, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict

from romplan.core.config import Settings, settings as default_settings
from romplan.core.errors import BackendUnavailable, InputInvalid, PlanPipelineError, describe
from romplan.core.logging import get_logger, safe_snippet
from romplan.llm.json_parse import extract_json
from romplan.llm.prompts import build_plan_prompt
from romplan.llm.router import ModelInvoker, build_invoker
from romplan.llm.schemas import Plan, PromptBlock
from romplan.pipeline.enforcer import normalize
from romplan.pipeline.fallback import fallback_plan
from romplan.pipeline.keywords import extract_keywords, is_narrow_topic
from romplan.pipeline.templates import TemplateRetriever
from romplan.pipeline.trends import TrendRetriever

log = get_logger("pipeline.planner")


class PlanOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    plan: Plan
    error: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.error is not None


class PlanPipeline:
    def __init__(
        self,
        invoker: ModelInvoker,
        *,
        templates: Optional[TemplateRetriever] = None,
        trends: Optional[TrendRetriever] = None,
        settings: Settings = default_settings,
        retry_backoff: float = 0.6,
    ):
        self.invoker = invoker
        self.settings = settings
        self.templates = templates or TemplateRetriever(invoker, max_tokens=settings.TEMPLATE_MAX_TOKENS)
        self.trends = trends or TrendRetriever(invoker, max_tokens=settings.TREND_MAX_TOKENS)
        self.retry_backoff = retry_backoff

    def keywords_for(self, need: str) -> List[str]:
        s = self.settings
        return extract_keywords(
            need,
            limit=s.KEYWORD_LIMIT,
            default=s.DEFAULT_KEYWORDS,
            policy=s.KEYWORD_POLICY,
            focus_vocabulary=s.FOCUS_VOCABULARY,
        )

    async def generate_plan(self, need: str) -> PlanOutcome:
        try:
            plan = await self._generate(need)
        except PlanPipelineError as e:
            log.warning(f"Plan generation failed, using fallback: {describe(e)}")
            return PlanOutcome(plan=fallback_plan(need), error=describe(e))
        except Exception as e:
            log.exception("Unexpected plan generation failure, using fallback")
            return PlanOutcome(plan=fallback_plan(need), error=describe(e))

        log.info(f"Plan ready: {safe_snippet(plan.goal, 80)} ({len(plan.phases)} phases)")
        return PlanOutcome(plan=plan)

    async def _generate(self, need: str) -> Plan:
        s = self.settings
        if not need or not need.strip():
            raise InputInvalid("need text is empty")

        templates = await self.templates.fetch_templates(need, s.TEMPLATE_K)
        log.info(f"Templates: {len(templates)}")

        keywords = self.keywords_for(need)
        trends = await self.trends.fetch_trends(keywords, s.TREND_TOP_N)
        log.info(f"Trends: {len(trends)} for {keywords}")

        quick_tip = s.QUICK_TIP_FOR_NARROW_TOPICS and is_narrow_topic(need, s.FOCUS_VOCABULARY)
        blocks = build_plan_prompt(templates, trends, need, quick_tip=quick_tip)

        text = await self._invoke_with_retry(blocks)
        candidate = extract_json(text, mode="object")
        return normalize(candidate)

    async def _invoke_with_retry(self, blocks: Sequence[PromptBlock]) -> str:
        attempts = 1 + max(0, self.settings.MODEL_RETRIES)
        last_err: Optional[BackendUnavailable] = None
        for attempt in range(attempts):
            try:
                return await self.invoker.invoke(blocks, max_tokens=self.settings.PLAN_MAX_TOKENS)
            except BackendUnavailable as e:
                last_err = e
                if attempt + 1 < attempts:
                    backoff = self.retry_backoff * (2**attempt)
                    log.warning(f"Model call failed: {e}. retrying in {backoff:.1f}s (attempt {attempt+1}/{attempts})")
                    await asyncio.sleep(backoff)
        raise last_err


def build_pipeline(settings: Settings, client: httpx.AsyncClient) -> PlanPipeline:
    return PlanPipeline(build_invoker(settings, client), settings=settings)
