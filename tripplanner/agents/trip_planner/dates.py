"""Keeps start date, number of days and end date consistent while the form is edited.

Of ``number_of_days`` and ``end_date`` only one is ever authoritative: the one the
user touched last. Editing ``start_date`` or ``number_of_days`` throws away the
end date, editing ``end_date`` throws away the day count, and the missing value
is derived again once a start date is known.
"""

import math
from datetime import date, timedelta
from typing import Optional

from tripplanner.schemas.trip_schemas import DateFields


def end_date_from_days(start_date: date, number_of_days: int) -> date:
    # inclusive: a 1-day trip ends on the day it starts
    return start_date + timedelta(days=number_of_days - 1)


def days_between(start_date: date, end_date: date) -> int:
    span = abs((end_date - start_date).total_seconds()) / 86400
    return math.ceil(span) + 1


def reconcile_dates(
    start_date: Optional[date],
    number_of_days: Optional[int],
    end_date: Optional[date],
    edited: Optional[str] = None,
) -> DateFields:
    """Return the consistent triple after an edit to ``edited`` (or a plain re-run when None).

    Out-of-order dates are not rejected here; the day count is computed from the
    absolute difference.
    """
    if edited in ("start_date", "number_of_days"):
        end_date = None
    elif edited == "end_date":
        number_of_days = None
    elif edited is not None:
        raise ValueError(f"Unknown date field: {edited}")

    if start_date is not None:
        if number_of_days is not None and end_date is None:
            end_date = end_date_from_days(start_date, number_of_days)
        elif end_date is not None and number_of_days is None:
            number_of_days = days_between(start_date, end_date)

    return DateFields(start_date=start_date, number_of_days=number_of_days, end_date=end_date)
