# adherence.py
# Calendar / history views over the daily logs. Pure functions: nothing here
# reads or writes the store.

import math
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from errors import ValidationError
from models import AdherenceEntry, AdherenceSummary, DailyLogEntry, Medicine, pad_time, parse_day

STATUSES = ("all", "taken", "missed")
SORT_KEYS = ("date", "medicine_name", "time", "taken")


def _padded(taken_times: Dict[str, bool]) -> Dict[str, bool]:
    # first key wins when "9:00" and "09:00" both exist
    out: Dict[str, bool] = {}
    for k, v in (taken_times or {}).items():
        out.setdefault(pad_time(k), v is True)
    return out


def build_entries(daily_logs: Dict[str, DailyLogEntry],
                  medicines: Iterable[Medicine]) -> List[AdherenceEntry]:
    """One (date, medicine, time, taken) row per scheduled dose per logged day.

    Only medicines that still exist contribute rows; log rows for deleted
    medicines are ignored. Times are read against the medicine's current
    schedule, so a time removed from the schedule disappears from history.
    """
    medicines = list(medicines)
    seen = set()
    entries: List[AdherenceEntry] = []
    for day, log in daily_logs.items():
        for med in medicines:
            med_log = log.for_medicine(med.id) if log is not None else None
            taken_times = _padded(med_log.taken_times) if med_log else {}
            for t in med.scheduled_times:
                hm = pad_time(t)
                key = (day, med.name, hm)
                if key in seen:
                    continue
                seen.add(key)
                entries.append(AdherenceEntry(day, med.name, hm, taken_times.get(hm) is True))
    return entries


def _js_weekday(d: date) -> int:
    # 0 = Sunday ... 6 = Saturday
    return (d.weekday() + 1) % 7


def filter_entries(entries: Iterable[AdherenceEntry], day_of_week: Optional[int] = None,
                   month: Optional[int] = None, year: Optional[int] = None,
                   status: str = "all") -> List[AdherenceEntry]:
    """AND-combined filters. day_of_week: 0 = Sunday; month: 0 = January."""
    if status not in STATUSES:
        raise ValidationError(f"status must be one of {STATUSES}")
    if day_of_week is not None and not 0 <= int(day_of_week) <= 6:
        raise ValidationError("day_of_week must be 0..6")
    if month is not None and not 0 <= int(month) <= 11:
        raise ValidationError("month must be 0..11")

    out = []
    for e in entries:
        if status == "taken" and not e.taken:
            continue
        if status == "missed" and e.taken:
            continue
        if day_of_week is not None or month is not None or year is not None:
            d = parse_day(e.date)
            if d is None:
                continue
            if day_of_week is not None and _js_weekday(d) != int(day_of_week):
                continue
            if month is not None and d.month != int(month) + 1:
                continue
            if year is not None and d.year != int(year):
                continue
        out.append(e)
    return out


def _sort_value(e: AdherenceEntry, key: str):
    if key == "taken":
        return 1 if e.taken else 0
    return getattr(e, key)


def sort_entries(entries: Iterable[AdherenceEntry], key: str = "date",
                 descending: bool = False) -> List[AdherenceEntry]:
    if key not in SORT_KEYS:
        raise ValidationError(f"sort key must be one of {SORT_KEYS}")
    return sorted(entries, key=lambda e: _sort_value(e, key), reverse=descending)


def calendar_order(entries: Iterable[AdherenceEntry]) -> List[AdherenceEntry]:
    """Newest day first, then medicine name, then time."""
    out = sorted(entries, key=lambda e: (e.medicine_name, e.time))
    return sorted(out, key=lambda e: e.date, reverse=True)


def missed_entries(entries: Iterable[AdherenceEntry]) -> List[AdherenceEntry]:
    return calendar_order(e for e in entries if not e.taken)


def percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(math.floor(part / total * 100 + 0.5))


def summarize(entries: Iterable[AdherenceEntry]) -> AdherenceSummary:
    entries = list(entries)
    total = len(entries)
    taken = sum(1 for e in entries if e.taken)
    return AdherenceSummary(total=total, taken_count=taken, missed_count=total - taken,
                            percentage=percentage(taken, total))


def daily_progress(medicine: Medicine) -> Tuple[int, int]:
    """(taken, scheduled) for today; stale keys outside the schedule don't count."""
    taken = _padded(medicine.taken_today)
    scheduled = [pad_time(t) for t in medicine.scheduled_times]
    return sum(1 for t in scheduled if taken.get(t) is True), len(scheduled)
