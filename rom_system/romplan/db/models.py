"""
Database table definitions and it stores:
- Plan requests (need text, lifecycle status, generated plan)
Main purpose:
Define persistent data structure.
"""



import uuid
from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from typing import Optional
from romplan.db.base import Base


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:16]}"


class PlanRequest(Base):
    __tablename__ = "requests"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    need: Mapped[str] = mapped_column(Text)
    file_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, default="generating")  # generating|complete|failed
    phases: Mapped[str] = mapped_column(Text, default="[]")
    result: Mapped[str] = mapped_column(Text, default="{}")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
