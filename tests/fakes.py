import json

from romplan.core.config import Settings
from romplan.llm.schemas import PromptBlock


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def kind_of(blocks) -> str:
    if len(blocks) == 3:
        return "plan"
    content = blocks[0].content
    if "plan templates" in content:
        return "templates"
    if "recent trends" in content:
        return "trends"
    return "unknown"


class RoutedInvoker:
    """
    Fake model invoker. Each call site gets its own queue of responses;
    an exception in the queue is raised instead of returned. The last
    item of a queue repeats once the queue runs dry.
    """

    def __init__(self, templates="[]", trends="[]", plan="{}"):
        self.queues = {
            "templates": self._as_list(templates),
            "trends": self._as_list(trends),
            "plan": self._as_list(plan),
        }
        self.calls = []

    @staticmethod
    def _as_list(value):
        return list(value) if isinstance(value, list) else [value]

    async def invoke(self, blocks, *, max_tokens, timeout=None):
        kind = kind_of(blocks)
        self.calls.append((kind, list(blocks), max_tokens))
        queue = self.queues[kind]
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, BaseException):
            raise item
        return item

    def count(self, kind: str) -> int:
        return sum(1 for k, _, _ in self.calls if k == kind)


SAMPLE_PLAN = {
    "goal": "Grow B2B pipeline",
    "phases": [
        {
            "title": "Discover",
            "tasks": [
                {
                    "task_id": "D1",
                    "title": "Interview buyers",
                    "owner": "Founder",
                    "start_date": "2026-01-05",
                    "end_date": "2026-01-12",
                    "success_metric": "10 interviews",
                    "instruction": "Book calls with ops leads.",
                    "example": "Ask about their current tooling.",
                }
            ],
        }
    ],
}


def dumps(value) -> str:
    return json.dumps(value)


def user_block(text: str) -> PromptBlock:
    return PromptBlock(role="user", content=text)
