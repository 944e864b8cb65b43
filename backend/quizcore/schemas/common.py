from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Decimals are kept exact in Python and rendered as JSON numbers on the wire.
Score = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]
