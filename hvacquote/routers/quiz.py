# hvacquote/routers/quiz.py
from __future__ import annotations

from functools import partial

from fastapi import APIRouter, Depends, HTTPException, Request

from hvacquote.core.logging_config import logger
from hvacquote.core.rate_limit import limit_from, limiter
from hvacquote.dependencies import get_pricing_engine, get_promo_repo, get_quiz_sessions
from hvacquote.pricing.engine import PricingEngine
from hvacquote.repositories.promo_codes import PromoCodeRepository
from hvacquote.routers.quotes import price_answers
from hvacquote.schemas.quiz import AnswerSubmission, QuizAnswers
from hvacquote.services.promo_resolution import find_active
from hvacquote.services.quiz_flow import (
    QUIZ_STEPS,
    InvalidPromoCodeError,
    QuizFlow,
    QuizSessionStore,
    QuizStepError,
)

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


def _step_payload(session_id: str, flow: QuizFlow) -> dict:
    return {
        "sessionId": session_id,
        "complete": False,
        "step": flow.current_step.to_dict(),
        "stepIndex": flow.step_index,
        "totalSteps": flow.total_steps,
    }


@router.get("/steps")
def list_steps():
    return [s.to_dict() for s in QUIZ_STEPS]


@router.post("/sessions", status_code=201)
@limiter.limit(limit_from("RATE_LIMIT_QUIZ_SESSIONS"))
def start_session(
    request: Request,
    sessions: QuizSessionStore = Depends(get_quiz_sessions),
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    flow = QuizFlow(promo_resolver=partial(find_active, repo))
    session_id = sessions.start(flow)
    logger.info("quiz_started", session_id=session_id, open_sessions=len(sessions))
    return _step_payload(session_id, flow)


@router.post("/sessions/{session_id}/answers")
def submit_answer(
    session_id: str,
    payload: AnswerSubmission,
    sessions: QuizSessionStore = Depends(get_quiz_sessions),
    engine: PricingEngine = Depends(get_pricing_engine),
):
    flow = sessions.get(session_id)
    if flow is None:
        raise HTTPException(status_code=404, detail={"message": "Quiz session not found"})

    try:
        nxt = flow.submit_answer(payload.questionId, payload.value)
    except InvalidPromoCodeError as e:
        raise HTTPException(status_code=404, detail={"message": str(e)})
    except QuizStepError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})

    if not isinstance(nxt, QuizAnswers):
        return _step_payload(session_id, flow)

    sessions.discard(session_id)
    logger.info("quiz_completed", session_id=session_id)
    return {
        "sessionId": session_id,
        "complete": True,
        "answers": nxt.model_dump(),
        # priced with the code accepted at the promo step, no second lookup
        "quote": price_answers(nxt, engine, flow.promo),
    }
