from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any


def aggregate(answers: Iterable[Any]) -> Decimal:
    """Exact sum of ``points_earned`` over answers; ungraded answers count as zero."""
    total = Decimal("0")
    for answer in answers:
        points = getattr(answer, "points_earned", None)
        if points is None:
            continue
        total += points if isinstance(points, Decimal) else Decimal(str(points))
    return total
