# hvacquote/schemas/quiz.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class QuizAnswers(BaseModel):
    """
    Final answer set of the quiz. Every field is optional: pricing falls back
    to defaults for anything missing or unexpected instead of rejecting it.
    """

    model_config = ConfigDict(extra="ignore")

    systemType: Optional[str] = None
    type: Optional[str] = None
    size: Optional[str] = None
    currentSystem: Optional[str] = None
    issue: Optional[str] = None
    priority: Optional[str] = None
    rebate: Optional[str] = Field(None, description="Promo code as typed by the user")


class AnswerSubmission(BaseModel):
    model_config = ConfigDict(extra="forbid")

    questionId: str = Field(min_length=1)
    value: str = ""
