from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    task_id: str
    title: str = ""
    owner: str = ""
    start_date: str = ""
    end_date: str = ""
    success_metric: str = ""
    instruction: str = Field(..., min_length=1)
    example: str = Field(..., min_length=1)


class Phase(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    tasks: List[Task] = []


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True)

    goal: str = Field(..., min_length=1)
    phases: List[Phase] = []


# few-shot examples share the plan shape
TemplateExample = Plan


class TrendSnippet(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    summary: str = ""
    url: Optional[str] = None
    date: Optional[str] = None


class PromptBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "assistant", "user"]
    content: str
