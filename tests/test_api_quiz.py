from fastapi.testclient import TestClient

from hvacquote.core.rate_limit import limiter
from hvacquote.core.settings import Settings
from hvacquote.main import create_app

ANSWERS = [
    ("systemType", "split"),
    ("type", "two-story"),
    ("size", "3ton"),
    ("currentSystem", "heatpump"),
    ("issue", "bills"),
    ("priority", "budget"),
]


def _start(client):
    r = client.post("/api/quiz/sessions")
    assert r.status_code == 201
    return r.json()


def _answer(client, sid, qid, value):
    return client.post(f"/api/quiz/sessions/{sid}/answers", json={"questionId": qid, "value": value})


def test_list_steps(client):
    steps = client.get("/api/quiz/steps").json()
    assert steps[0]["id"] == "systemType"
    assert steps[-1] == {
        "id": "rebate",
        "question": "Enter a promo code for rebates or discounts",
        "type": "input",
        "options": [],
    }


def test_start_session(client):
    body = _start(client)
    assert body["complete"] is False
    assert body["step"]["id"] == "systemType"
    assert (body["stepIndex"], body["totalSteps"]) == (0, 7)


def test_full_quiz_returns_quote(client):
    sid = _start(client)["sessionId"]
    for qid, value in ANSWERS:
        r = _answer(client, sid, qid, value)
        assert r.status_code == 200
        assert r.json()["complete"] is False

    r = _answer(client, sid, "rebate", "FullSystem")
    body = r.json()
    assert body["complete"] is True
    assert body["answers"]["priority"] == "budget"
    assert body["quote"]["tiers"]["silver"]["low"] == 9600
    assert body["quote"]["rebateApplied"] == 1000

    # finished sessions are gone
    assert _answer(client, sid, "rebate", "").status_code == 404


def test_invalid_promo_code_is_rejected(client):
    sid = _start(client)["sessionId"]
    for qid, value in ANSWERS:
        _answer(client, sid, qid, value)

    r = _answer(client, sid, "rebate", "BOGUS")
    assert r.status_code == 404
    assert r.json() == {"message": "This promo code is either invalid or expired."}

    # still on the promo step, skipping it works
    r = _answer(client, sid, "rebate", "")
    assert r.json()["complete"] is True
    assert r.json()["quote"]["rebateApplied"] == 0


def test_wrong_step_and_option(client):
    sid = _start(client)["sessionId"]
    assert _answer(client, sid, "size", "3ton").status_code == 400
    r = _answer(client, sid, "systemType", "geothermal")
    assert r.status_code == 400
    assert "geothermal" in r.json()["message"]


def test_unknown_session(client):
    r = _answer(client, "does-not-exist", "systemType", "split")
    assert r.status_code == 404
    assert r.json() == {"message": "Quiz session not found"}


def _walk(client, sid):
    for qid, value in ANSWERS:
        assert _answer(client, sid, qid, value).status_code == 200


def test_active_zero_amount_code_passes_promo_step(client):
    assert client.post("/api/promoCodes", json={"code": "Welcome", "amount": 0}).status_code == 201
    sid = _start(client)["sessionId"]
    _walk(client, sid)

    r = _answer(client, sid, "rebate", "welcome")
    assert r.status_code == 200
    quote = r.json()["quote"]
    assert quote["promoApplied"] is True
    assert quote["rebateApplied"] == 0
    assert quote["tiers"]["silver"]["low"] == 10600


def test_quote_uses_code_accepted_at_promo_step(client, promo_repo):
    sid = _start(client)["sessionId"]
    _walk(client, sid)

    # deactivate the code as soon as it has been looked up once
    lookups = []
    original = promo_repo.get_by_code

    def lookup_then_deactivate(code):
        lookups.append(code)
        promo = original(code)
        promo_repo.update(promo.id, {"isActive": False})
        return promo

    promo_repo.get_by_code = lookup_then_deactivate

    r = _answer(client, sid, "rebate", "FullSystem")
    assert r.status_code == 200
    assert r.json()["quote"]["rebateApplied"] == 1000
    assert r.json()["quote"]["tiers"]["silver"]["low"] == 9600
    assert len(lookups) == 1


def test_open_sessions_stay_bounded(promo_repo):
    limiter.reset()
    app = create_app(
        settings=Settings(SENTRY_DSN=None, QUIZ_MAX_SESSIONS=5, RATE_LIMIT_QUIZ_SESSIONS="1000/minute"),
        promo_repo=promo_repo,
    )
    client = TestClient(app)

    first = _start(client)["sessionId"]
    for _ in range(50):
        _start(client)

    assert len(app.state.quiz_sessions) == 5
    assert _answer(client, first, "systemType", "split").status_code == 404


def test_session_start_is_rate_limited(promo_repo):
    limiter.reset()
    client = TestClient(
        create_app(
            settings=Settings(SENTRY_DSN=None, RATE_LIMIT_QUIZ_SESSIONS="2/minute"),
            promo_repo=promo_repo,
        )
    )

    _start(client)
    _start(client)
    r = client.post("/api/quiz/sessions")
    assert r.status_code == 429
    assert r.json()["message"].startswith("Rate limit exceeded")
