"""
Human-readable document numbers.

Quotations: ``OFF-<epoch millis>``. Invoices: ``FAC-<year>-<NNNN>``, the
counter restarting every year and continuing from the highest number
already issued that year. Neither is guarded against concurrent creation.
"""

import re
from collections.abc import Iterable
from datetime import datetime

from src.core.entities.base import utcnow


def quotation_number(now: datetime | None = None, prefix: str = "OFF") -> str:
    """Timestamp-based quotation number."""
    now = now or utcnow()
    return f"{prefix}-{int(now.timestamp() * 1000)}"


def invoice_number(
    existing_numbers: Iterable[str | None],
    now: datetime | None = None,
    prefix: str = "FAC",
) -> str:
    """Next invoice number for the year of *now*."""
    now = now or utcnow()
    pattern = re.compile(rf"^{re.escape(prefix)}-{now.year}-(\d+)$")

    highest = 0
    for number in existing_numbers:
        match = pattern.match(number or "")
        if match:
            highest = max(highest, int(match.group(1)))

    return f"{prefix}-{now.year}-{highest + 1:04d}"
