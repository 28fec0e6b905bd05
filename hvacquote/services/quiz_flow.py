# hvacquote/services/quiz_flow.py
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple, Union

from hvacquote.core.logging_config import logger
from hvacquote.repositories.promo_codes import PromoCode
from hvacquote.schemas.quiz import QuizAnswers


class QuizStepError(ValueError):
    """Answer does not fit the current step."""


class InvalidPromoCodeError(ValueError):
    def __init__(self, code: str):
        super().__init__("This promo code is either invalid or expired.")
        self.code = code


@dataclass(frozen=True)
class QuizOption:
    id: str
    label: str


@dataclass(frozen=True)
class QuizStep:
    id: str
    question: str
    options: Tuple[QuizOption, ...] = ()
    kind: str = "choice"  # choice | input

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "type": self.kind,
            "options": [{"id": o.id, "label": o.label} for o in self.options],
        }


def _opts(*pairs: Tuple[str, str]) -> Tuple[QuizOption, ...]:
    return tuple(QuizOption(id=i, label=l) for i, l in pairs)


QUIZ_STEPS: Tuple[QuizStep, ...] = (
    QuizStep(
        id="systemType",
        question="What type of HVAC system do you currently have?",
        options=_opts(
            ("split", "Split System (Outdoor Unit + Indoor Unit)"),
            ("package", "Package Unit (Single Large Outdoor Unit)"),
            ("gaspack", "Gas Pack (Gas Heat + Electric Cooling)"),
        ),
    ),
    QuizStep(
        id="type",
        question="What type of home do you have?",
        options=_opts(
            ("ranch", "Ranch House"),
            ("two-story", "Two-Story House"),
            ("townhouse", "Townhouse"),
            ("condo", "Condo"),
        ),
    ),
    QuizStep(
        id="size",
        question="How large is your home?",
        options=_opts(
            ("2ton", "2 Ton (1000-1200 sq ft)"),
            ("3ton", "3 Ton (1200-1800 sq ft)"),
            ("4ton", "4 Ton (1800-2400 sq ft)"),
            ("5ton", "5 Ton (2400-3000 sq ft)"),
        ),
    ),
    QuizStep(
        id="currentSystem",
        question="How do you currently heat your home?",
        options=_opts(
            ("furnace", "Gas Furnace"),
            ("heatpump", "Electric Heat Pump"),
            ("boiler", "Boiler / Radiators"),
            ("unknown", "I'm not sure"),
        ),
    ),
    QuizStep(
        id="issue",
        question="What's the main reason you're looking to replace?",
        options=_opts(
            ("broken", "System is broken"),
            ("old", "System is old (10+ years)"),
            ("bills", "High energy bills"),
            ("comfort", "Uneven temperatures"),
        ),
    ),
    QuizStep(
        id="priority",
        question="What matters most to you?",
        options=_opts(
            ("budget", "Lowest Upfront Cost"),
            ("value", "Best Value (Cost vs. Performance)"),
            ("performance", "Maximum Comfort & Efficiency"),
        ),
    ),
    QuizStep(
        id="rebate",
        question="Enter a promo code for rebates or discounts",
        kind="input",
    ),
)


class QuizFlow:
    """
    Walks the quiz steps in order and collects answers.

    `promo_resolver` returns the active promo code for what the user typed, or
    None. A non-empty code without an active match is rejected and the flow
    stays on the step. The accepted code is kept on the flow so pricing can use
    it without a second lookup.
    """

    def __init__(
        self,
        promo_resolver: Callable[[str], Optional[PromoCode]],
        steps: Tuple[QuizStep, ...] = QUIZ_STEPS,
    ):
        if not steps:
            raise ValueError("quiz needs at least one step")
        self.steps = steps
        self.promo_resolver = promo_resolver
        self.answers: Dict[str, str] = {}
        self.promo: Optional[PromoCode] = None
        self._index = 0

    @property
    def step_index(self) -> int:
        return self._index

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def complete(self) -> bool:
        return self._index >= len(self.steps)

    @property
    def current_step(self) -> Optional[QuizStep]:
        return None if self.complete else self.steps[self._index]

    def submit_answer(self, question_id: str, value: str) -> Union[QuizStep, QuizAnswers]:
        step = self.current_step
        if step is None:
            raise QuizStepError("Quiz is already complete")
        if question_id != step.id:
            raise QuizStepError(f"Expected an answer for '{step.id}', got '{question_id}'")

        value = (value or "").strip()
        if step.kind == "choice":
            if value not in {o.id for o in step.options}:
                raise QuizStepError(f"Unknown option '{value}' for '{step.id}'")
        elif step.id == "rebate" and value:
            promo = self.promo_resolver(value)
            if promo is None:
                raise InvalidPromoCodeError(value)
            self.promo = promo

        self.answers[step.id] = value
        self._index += 1

        if self.complete:
            return self.final_answers()
        return self.steps[self._index]

    @property
    def rebate_amount(self) -> int:
        return self.promo.amount if self.promo else 0

    def final_answers(self) -> QuizAnswers:
        return QuizAnswers(**self.answers)


@dataclass
class QuizSessionStore:
    """
    Open quiz sessions by id (process memory).

    Sessions expire `ttl_seconds` after they were started. At most
    `max_sessions` are kept; starting one more drops the oldest.
    """

    max_sessions: int = 1000
    ttl_seconds: float = 1800.0
    clock: Callable[[], float] = time.monotonic
    # insertion order == start order, oldest first
    sessions: Dict[str, Tuple[QuizFlow, float]] = field(default_factory=dict)

    def start(self, flow: QuizFlow) -> str:
        self._expire()
        while len(self.sessions) >= self.max_sessions:
            oldest = next(iter(self.sessions))
            del self.sessions[oldest]
            logger.info("quiz_session_evicted", session_id=oldest)

        session_id = uuid.uuid4().hex
        self.sessions[session_id] = (flow, self.clock())
        return session_id

    def get(self, session_id: str) -> Optional[QuizFlow]:
        entry = self.sessions.get(session_id)
        if entry is None:
            return None
        flow, started = entry
        if self.clock() - started >= self.ttl_seconds:
            del self.sessions[session_id]
            return None
        return flow

    def discard(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    def _expire(self) -> None:
        now = self.clock()
        for session_id, (_, started) in list(self.sessions.items()):
            if now - started < self.ttl_seconds:
                break
            del self.sessions[session_id]

    def __len__(self) -> int:
        return len(self.sessions)
