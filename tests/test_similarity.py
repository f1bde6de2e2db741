import pytest

from crm_dedupe.steps.similarity import levenshtein, name_similarity


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("", "", 0),
        ("", "abc", 3),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("robert johnson", "robrt jonson", 2),
    ],
)
def test_levenshtein_distances(left: str, right: str, expected: int) -> None:
    assert levenshtein(left, right) == expected
    assert levenshtein(right, left) == expected


def test_levenshtein_does_not_fold_case_or_trim() -> None:
    assert levenshtein("Jane", "jane") == 1
    assert levenshtein(" jane", "jane") == 1


def test_name_similarity_ratio() -> None:
    assert name_similarity("robert johnson", "robrt jonson") == pytest.approx(1 - 2 / 14)


def test_name_similarity_identical_and_empty() -> None:
    assert name_similarity("", "") == 1.0
    assert name_similarity("jane doe", "jane doe") == 1.0
    assert name_similarity("", "jane") == 0.0
    assert name_similarity("jane", "") == 0.0
