from __future__ import annotations

import datetime as dt


def months_between(start: dt.date, end: dt.date) -> int:
    """
    Différence en mois calendaires (année*12 + mois), sans tenir compte du jour.
    Peut être négative si end < start.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def windows_overlap(
    start_a: dt.date,
    end_a: dt.date,
    start_b: dt.date,
    end_b: dt.date,
) -> bool:
    # intervalles fermés
    return start_a <= end_b and start_b <= end_a
