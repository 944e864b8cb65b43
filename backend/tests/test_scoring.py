import itertools
from decimal import Decimal
from types import SimpleNamespace

from quizcore.services.scoring import aggregate


def _answers(*points):
    return [SimpleNamespace(points_earned=p) for p in points]


def test_sums_points_earned():
    assert aggregate(_answers(Decimal("10"), Decimal("5"), Decimal("0"))) == Decimal("15")


def test_empty_is_zero():
    assert aggregate([]) == Decimal("0")


def test_ungraded_answers_count_as_zero():
    assert aggregate(_answers(Decimal("2.5"), None, Decimal("1.25"))) == Decimal("3.75")


def test_sum_is_exact_and_order_independent():
    points = [Decimal("0.1"), Decimal("0.2"), Decimal("10.5"), None, Decimal("0.7")]
    totals = {aggregate(_answers(*perm)) for perm in itertools.permutations(points)}
    assert totals == {Decimal("11.5")}
