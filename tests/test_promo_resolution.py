import pytest

from hvacquote.services.promo_resolution import find_active, resolve_rebate


@pytest.mark.parametrize("typed", ["fullsystem", "FullSystem", "Full System"])
def test_resolve_is_case_and_whitespace_insensitive(promo_repo, typed):
    assert resolve_rebate(promo_repo, typed) == 1000


def test_unknown_code_resolves_to_zero(promo_repo):
    assert resolve_rebate(promo_repo, "NOPE") == 0


@pytest.mark.parametrize("typed", [None, "", "   "])
def test_empty_code_resolves_to_zero(promo_repo, typed):
    assert resolve_rebate(promo_repo, typed) == 0


def test_inactive_code_resolves_to_zero(promo_repo):
    promo_repo.update(2, {"isActive": False})
    assert resolve_rebate(promo_repo, "IAQBundle") == 0
    assert find_active(promo_repo, "IAQBundle") is None


def test_find_active_returns_record(promo_repo):
    promo = find_active(promo_repo, "switch2electric")
    assert promo.id == 1
    assert promo.amount == 500
