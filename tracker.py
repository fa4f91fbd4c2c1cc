# tracker.py
# Day rollover, dose toggling and the catalog glue the screens call into.
#
# "Taken today" lives in two places: Medicine.taken_today and today's
# DailyLogEntry. The medicine is the source of truth for today; reconcile()
# rewrites today's log from it, so a crash between the two writes of
# toggle_dose() heals on the next activation.

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional

import adherence
from daily_logs import DailyLogRepository
from errors import MedTrackError, NotFound, ValidationError
from medicines import MedicineRepository
from models import (AdherenceEntry, AdherenceSummary, DailyLogEntry, Medicine, MedicineLog,
                    iso_date, pad_time, parse_day)
from reminders import ReminderScheduler, reminder_prefix, sync_all_reminders, sync_medicine_reminders
from store import KeyValueStore

logger = logging.getLogger("medtrack.tracker")

EDITABLE_FIELDS = ("name", "quantity", "scheduled_times", "photo")


@dataclass
class DoseToggle:
    medicine: Medicine
    log_entry: DailyLogEntry
    taken: bool


def full_taken_map(medicine: Medicine, taken: Dict[str, bool]) -> Dict[str, bool]:
    """One boolean per scheduled time; keys outside the schedule are dropped."""
    padded = {}
    for k, v in (taken or {}).items():
        padded.setdefault(pad_time(k), v is True)
    return {t: padded.get(pad_time(t), False) for t in medicine.scheduled_times}


class DoseTracker:
    def __init__(self, store: KeyValueStore, scheduler: Optional[ReminderScheduler] = None):
        self.store = store
        self.medicines = MedicineRepository(store)
        self.logs = DailyLogRepository(store)
        self.scheduler = scheduler
        self.last_reconciled: Optional[date] = None
        self._listeners: List[Callable[[str], None]] = []

    # -------------------------
    # Listeners
    # -------------------------
    def subscribe(self, callback: Callable[[str], None]):
        self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[[str], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, event: str):
        for cb in list(self._listeners):
            try:
                cb(event)
            except Exception:
                logger.exception("listener failed for %s", event)

    # -------------------------
    # Day rollover
    # -------------------------
    def needs_reconcile(self, today: Optional[date] = None) -> bool:
        return self.last_reconciled != (today or date.today())

    def reconcile(self, today: Optional[date] = None) -> DailyLogEntry:
        """Reset stale taken-state and rewrite today's log. Safe to repeat."""
        today = today or date.today()
        today_s = iso_date(today)

        current: List[Medicine] = []
        dirty: List[Medicine] = []
        for med in self.medicines.list():
            if parse_day(med.last_reset_date) != today:
                med.taken_today = {}
                med.last_reset_date = today_s
                dirty.append(med)
            current.append(med)

        for med in dirty:
            try:
                self.medicines.update(med.id, taken_today=med.taken_today,
                                      last_reset_date=med.last_reset_date)
            except MedTrackError:
                logger.exception("rollover reset failed for medicine id=%s", med.id)

        entry = DailyLogEntry(date=today_s)
        for med in current:
            entry.per_medicine[str(med.id)] = MedicineLog(med.name, full_taken_map(med, med.taken_today))
        self.logs.put(today_s, entry)

        if dirty:
            logger.info("rollover %s: reset %d of %d medicines", today_s, len(dirty), len(current))
        self.last_reconciled = today
        self._notify("daily_logs")
        return entry

    # -------------------------
    # Dose toggle
    # -------------------------
    def toggle_dose(self, medicine_id: int, time: str, today: Optional[date] = None) -> DoseToggle:
        today = today or date.today()
        today_s = iso_date(today)
        med = self.medicines.get(medicine_id)
        hm = pad_time(time)
        if hm not in [pad_time(t) for t in med.scheduled_times]:
            raise NotFound(f"{hm} is not a scheduled time of medicine {medicine_id}")

        # state left over from another day counts as untaken
        previous = med.taken_today if parse_day(med.last_reset_date) == today else {}
        previous = full_taken_map(med, previous)
        new_value = not previous.get(hm, False)

        taken = dict(previous)
        taken[hm] = new_value
        quantity = med.quantity
        if new_value and quantity > 0:
            quantity -= 1

        updated = self.medicines.update(med.id, allow_empty_stock=True, taken_today=taken,
                                        last_reset_date=today_s, quantity=quantity)

        entry = self.logs.get(today_s) or DailyLogEntry(date=today_s)
        entry.per_medicine[str(med.id)] = MedicineLog(updated.name, dict(taken))
        self.logs.put(today_s, entry)

        logger.info("dose %s: medicine id=%s %s @ %s (stock %s)",
                    "taken" if new_value else "untaken", med.id, med.name, hm, quantity)
        self._notify("medicines")
        self._notify("daily_logs")
        return DoseToggle(medicine=updated, log_entry=entry, taken=new_value)

    # -------------------------
    # Catalog
    # -------------------------
    def list_medicines(self) -> List[Medicine]:
        return self.medicines.list()

    def add_medicine(self, name: str, quantity: int, scheduled_times, photo: Optional[str] = None,
                     today: Optional[date] = None) -> Medicine:
        med = self.medicines.create(name, quantity, scheduled_times, photo=photo, today=today)
        self._sync_one(med)
        self.reconcile(today)
        self._notify("medicines")
        return med

    def edit_medicine(self, medicine_id: int, today: Optional[date] = None, **fields) -> Medicine:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"cannot edit {', '.join(sorted(unknown))}")
        med = self.medicines.update(medicine_id, **fields)
        self._sync_one(med)
        self.reconcile(today)
        self._notify("medicines")
        return med

    def remove_medicine(self, medicine_id: int):
        """Delete the medicine and its reminders. Its log rows stay as history."""
        self.medicines.delete(medicine_id)
        if self.scheduler is not None:
            self.scheduler.cancel_by_prefix(reminder_prefix(medicine_id))
        self._notify("medicines")

    # -------------------------
    # Reminders
    # -------------------------
    def _sync_one(self, med: Medicine):
        if self.scheduler is not None:
            sync_medicine_reminders(self.scheduler, med)

    def resync_reminders(self) -> int:
        if self.scheduler is None:
            return 0
        return sync_all_reminders(self.scheduler, self.medicines.list())

    # -------------------------
    # History
    # -------------------------
    def entries(self, day_of_week: Optional[int] = None, month: Optional[int] = None,
                year: Optional[int] = None, status: str = "all", sort_key: Optional[str] = None,
                descending: bool = False) -> List[AdherenceEntry]:
        rows = adherence.build_entries(self.logs.get_all(), self.medicines.list())
        rows = adherence.filter_entries(rows, day_of_week=day_of_week, month=month,
                                        year=year, status=status)
        if sort_key is None:
            return adherence.calendar_order(rows)
        return adherence.sort_entries(rows, key=sort_key, descending=descending)

    def summary(self, **filters) -> AdherenceSummary:
        return adherence.summarize(self.entries(**filters))

    def delete_logs_for_month(self, month: int, year: int) -> int:
        removed = self.logs.delete_all_for_month(month, year)
        self._notify("daily_logs")
        return removed

    def clear_logs(self):
        self.logs.clear_all()
        self._notify("daily_logs")
