import itertools

from crm_dedupe.models import CustomerRecord
from crm_dedupe.schema import MatchCategory
from crm_dedupe.steps.cleanup import RecordNormalizer
from crm_dedupe.steps.matching import CANDIDATE_THRESHOLD, MatchPolicy, WeightedCustomerMatcher


def _customer(customer_id: str, email: str = "", first: str = "", last: str = "", phone: str | None = None) -> CustomerRecord:
    return CustomerRecord(customer_id=customer_id, email=email, first_name=first, last_name=last, phone=phone)


SAMPLE = [
    _customer("a", "x@y.com", "Jane", "Doe"),
    _customer("b", "X@Y.com", "J", "Doe"),
    _customer("c", "", "Bob", "Smith", "555-111-2222"),
    _customer("d", "", "Bob", "Smith", "(555) 111-2222"),
    _customer("e", "", "Robert", "Johnson"),
    _customer("f", "", "Robrt", "Jonson"),
    _customer("g", "g@example.com", "Al", "", "555-1234"),
    _customer("h", "h@example.com", "Al", "", "5551234"),
    _customer("i"),
    _customer("j"),
]


def test_same_email_alone_caps_at_100() -> None:
    result = WeightedCustomerMatcher().score(SAMPLE[0], SAMPLE[1])

    assert result.score == 100
    assert "same email address" in result.reasons
    assert result.categories == {MatchCategory.EMAIL}


def test_same_phone_and_same_name() -> None:
    result = WeightedCustomerMatcher().score(SAMPLE[2], SAMPLE[3])

    assert result.score == 100
    assert result.reasons == ["same phone number", "same full name"]


def test_similar_name_alone_is_not_a_candidate() -> None:
    matcher = WeightedCustomerMatcher()
    result = matcher.score(SAMPLE[4], SAMPLE[5])

    assert result.score == 40
    assert result.reasons == ["similar name"]
    assert not matcher.is_candidate(result)


def test_phone_alone_reaches_threshold() -> None:
    matcher = WeightedCustomerMatcher()
    left = _customer("p1", phone="+1 555 111 2222")
    right = _customer("p2", phone="15551112222")

    result = matcher.score(left, right)

    assert result.score == 80
    assert result.reasons == ["same phone number"]
    assert matcher.is_candidate(result)


def test_short_phone_numbers_never_match() -> None:
    result = WeightedCustomerMatcher().score(SAMPLE[6], SAMPLE[7])

    assert "same phone number" not in result.reasons


def test_short_equal_names_fall_through_to_similarity() -> None:
    result = WeightedCustomerMatcher().score(SAMPLE[6], SAMPLE[7])

    assert result.reasons == ["similar name"]
    assert result.score == 40


def test_empty_records_score_zero() -> None:
    matcher = WeightedCustomerMatcher()
    result = matcher.score(SAMPLE[8], SAMPLE[9])

    assert result.score == 0
    assert result.reasons == []
    assert not matcher.is_candidate(result)


def test_missing_name_on_one_side_gives_no_name_bonus() -> None:
    result = WeightedCustomerMatcher().score(_customer("m1", first="Jane", last="Doe"), _customer("m2"))

    assert result.score == 0


def test_score_is_symmetric() -> None:
    matcher = WeightedCustomerMatcher()
    for left, right in itertools.combinations(SAMPLE, 2):
        forward = matcher.score(left, right)
        backward = matcher.score(right, left)
        assert forward.score == backward.score
        assert sorted(forward.reasons) == sorted(backward.reasons)


def test_name_bonuses_are_mutually_exclusive() -> None:
    matcher = WeightedCustomerMatcher()
    for left, right in itertools.combinations(SAMPLE, 2):
        reasons = matcher.score(left, right).reasons
        assert not ("same full name" in reasons and "similar name" in reasons)


def test_candidate_iff_score_reaches_threshold() -> None:
    matcher = WeightedCustomerMatcher()
    for left, right in itertools.combinations(SAMPLE, 2):
        result = matcher.score(left, right)
        assert matcher.is_candidate(result) == (result.score >= CANDIDATE_THRESHOLD)
        assert 0 <= result.score <= 100


def test_custom_policy_threshold() -> None:
    matcher = WeightedCustomerMatcher(policy=MatchPolicy(candidate_threshold=90))
    result = matcher.score(SAMPLE[2], _customer("z", phone="5551112222"))

    assert result.score == 80
    assert not matcher.is_candidate(result)


def test_extra_normalizer_transforms_apply_before_scoring() -> None:
    def strip_plus_tag(email: str) -> str:
        local, _, domain = email.partition("@")
        return f"{local.split('+', 1)[0]}@{domain}" if domain else email

    matcher = WeightedCustomerMatcher(normalizer=RecordNormalizer({"email": strip_plus_tag}))
    left = _customer("t1", "Jane+shop@Example.com ")
    right = _customer("t2", "jane@example.com")

    assert WeightedCustomerMatcher().score(left, right).score == 0
    assert matcher.score(left, right).reasons == ["same email address"]


def test_non_text_values_are_compared_as_text() -> None:
    matcher = WeightedCustomerMatcher()
    numeric_phone = CustomerRecord("a", phone=5551112222)  # type: ignore[arg-type]
    formatted_phone = CustomerRecord("b", phone="555-111-2222")

    result = matcher.score(numeric_phone, formatted_phone)

    assert result.score == 80
    assert result.reasons == ["same phone number"]


def test_numeric_email_and_name_values_score_without_error() -> None:
    left = CustomerRecord("a", email=12345, first_name=7, last_name=None)  # type: ignore[arg-type]
    right = CustomerRecord("b", email="12345", first_name="7", last_name="")

    result = WeightedCustomerMatcher().score(left, right)

    assert result.reasons == ["same email address", "similar name"]
    assert result.score == 100
