"""
Application configuration loader and it handles:
- Environment variables
- Model provider + per call-site output bounds
- Retrieval sizes and keyword policy
- Database configuration

And, the main purpose:
Central place for system configuration.
"""


from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./rom.db"

    # LLM
    LLM_PROVIDER: str = "groq"  # groq | hf | mock (for no-key dev)
    GROQ_API_KEY: str = ""
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    LLM_MODEL: str = "llama-3.3-70b-versatile"
    HF_API_TOKEN: str = ""
    HF_BASE_URL: str = "https://api-inference.huggingface.co"
    HF_MODEL: str = "microsoft/DialoGPT-medium"
    MOCK_RESPONSE: str = ""

    LLM_TIMEOUT_SECONDS: float = 40.0
    LLM_CONNECT_TIMEOUT_SECONDS: float = 10.0
    MODEL_RETRIES: int = 1

    # max generated tokens per call site
    PLAN_MAX_TOKENS: int = 500
    TEMPLATE_MAX_TOKENS: int = 300
    TREND_MAX_TOKENS: int = 200

    # Retrieval
    TEMPLATE_K: int = 2
    TREND_TOP_N: int = 3
    KEYWORD_LIMIT: int = 4
    DEFAULT_KEYWORDS: List[str] = ["growth", "b2b"]

    # Narrow-topic policy
    KEYWORD_POLICY: str = "tokens"  # tokens | focus
    FOCUS_VOCABULARY: List[str] = [
        "b2b", "growth", "sales", "pipeline", "startup", "revenue",
        "market", "customers", "leads", "launch", "mvp", "saas",
    ]
    QUICK_TIP_FOR_NARROW_TOPICS: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
