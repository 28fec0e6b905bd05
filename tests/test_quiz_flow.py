import pytest

from hvacquote.repositories.promo_codes import InMemoryPromoCodeRepository
from hvacquote.schemas.quiz import QuizAnswers
from hvacquote.services.quiz_flow import (
    QUIZ_STEPS,
    InvalidPromoCodeError,
    QuizFlow,
    QuizSessionStore,
    QuizStepError,
)

ANSWERS = [
    ("systemType", "package"),
    ("type", "ranch"),
    ("size", "4ton"),
    ("currentSystem", "furnace"),
    ("issue", "old"),
    ("priority", "budget"),
]


@pytest.fixture
def repo():
    repo = InMemoryPromoCodeRepository.with_defaults()
    repo.create(code="Welcome", amount=0)
    repo.update(repo.get_by_code("FastTrack").id, {"isActive": False})
    return repo


def _active(repo, code):
    promo = repo.get_by_code(code)
    return promo if promo and promo.isActive else None


@pytest.fixture
def flow(repo):
    return QuizFlow(promo_resolver=lambda code: _active(repo, code))


def _walk(flow):
    for qid, value in ANSWERS:
        flow.submit_answer(qid, value)


def test_steps_are_ordered():
    assert [s.id for s in QUIZ_STEPS] == [
        "systemType",
        "type",
        "size",
        "currentSystem",
        "issue",
        "priority",
        "rebate",
    ]


def test_submit_advances_to_next_step(flow):
    nxt = flow.submit_answer("systemType", "split")
    assert nxt.id == "type"
    assert flow.step_index == 1


def test_full_walk_emits_answer_set(flow):
    _walk(flow)
    result = flow.submit_answer("rebate", "Full System")

    assert isinstance(result, QuizAnswers)
    assert result.systemType == "package"
    assert result.size == "4ton"
    assert result.priority == "budget"
    assert result.rebate == "Full System"
    assert flow.rebate_amount == 1000
    assert flow.promo.code == "FullSystem"
    assert flow.complete


def test_empty_promo_code_is_accepted(flow):
    _walk(flow)
    result = flow.submit_answer("rebate", "")
    assert result.rebate == ""
    assert flow.rebate_amount == 0
    assert flow.promo is None


def test_active_zero_amount_code_is_accepted(flow):
    _walk(flow)
    result = flow.submit_answer("rebate", "welcome")
    assert isinstance(result, QuizAnswers)
    assert flow.promo.code == "Welcome"
    assert flow.rebate_amount == 0


def test_inactive_code_is_rejected(flow):
    _walk(flow)
    with pytest.raises(InvalidPromoCodeError):
        flow.submit_answer("rebate", "FastTrack")
    assert flow.promo is None


def test_invalid_promo_keeps_flow_on_step(flow):
    _walk(flow)
    with pytest.raises(InvalidPromoCodeError):
        flow.submit_answer("rebate", "BOGUS")
    assert flow.current_step.id == "rebate"
    assert not flow.complete


def test_wrong_question_id(flow):
    with pytest.raises(QuizStepError):
        flow.submit_answer("size", "3ton")


def test_unknown_option(flow):
    with pytest.raises(QuizStepError):
        flow.submit_answer("systemType", "geothermal")


def test_submit_after_completion(flow):
    _walk(flow)
    flow.submit_answer("rebate", "")
    with pytest.raises(QuizStepError):
        flow.submit_answer("rebate", "")


def test_session_store(flow):
    store = QuizSessionStore()
    sid = store.start(flow)
    assert store.get(sid) is flow
    assert len(store) == 1
    store.discard(sid)
    assert store.get(sid) is None


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_session_store_drops_oldest_when_full(flow):
    store = QuizSessionStore(max_sessions=3)
    ids = [store.start(flow) for _ in range(10)]

    assert len(store) == 3
    assert [store.get(sid) for sid in ids[:7]] == [None] * 7
    assert all(store.get(sid) is flow for sid in ids[7:])


def test_session_store_expires_sessions(flow):
    clock = FakeClock()
    store = QuizSessionStore(ttl_seconds=60, clock=clock)
    old = store.start(flow)

    clock.now = 30
    fresh = store.start(flow)
    assert store.get(old) is flow

    clock.now = 61
    assert store.get(old) is None
    assert store.get(fresh) is flow

    # starting a session sweeps the expired ones
    clock.now = 200
    store.start(flow)
    assert len(store) == 1
