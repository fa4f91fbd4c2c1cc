# daily_logs.py
# date -> DailyLogEntry map stored as one blob. Writes replace a whole day;
# merging a single medicine into a day is the caller's job.

import logging
from threading import RLock
from typing import Dict, Optional

from errors import ValidationError
from models import DailyLogEntry, parse_day
from store import DAILY_LOGS, KeyValueStore, read_json, write_json

logger = logging.getLogger("medtrack.daily_logs")


class DailyLogRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store
        self._lock = RLock()

    def _load_raw(self) -> dict:
        return read_json(self.store, DAILY_LOGS, {})

    def get_all(self) -> Dict[str, DailyLogEntry]:
        with self._lock:
            raw = self._load_raw()
        logs = {}
        for day, entry in raw.items():
            if isinstance(entry, dict):
                logs[day] = DailyLogEntry.from_dict(entry, date_key=day)
        return logs

    def get(self, day: str) -> Optional[DailyLogEntry]:
        return self.get_all().get(str(day))

    def put(self, day: str, entry: DailyLogEntry):
        with self._lock:
            raw = self._load_raw()
            raw[str(day)] = entry.to_dict()
            write_json(self.store, DAILY_LOGS, raw)
        logger.info("saved daily log for %s (%d logs)", day, len(raw))

    def delete(self, day: str) -> bool:
        with self._lock:
            raw = self._load_raw()
            if str(day) not in raw:
                return False
            del raw[str(day)]
            write_json(self.store, DAILY_LOGS, raw)
        return True

    def delete_all_for_month(self, month: int, year: int) -> int:
        """Drop every day of `month` (0 = January) in `year` with a single write."""
        if isinstance(month, bool) or not isinstance(month, int) or not 0 <= month <= 11:
            raise ValidationError(f"month must be 0..11, got {month!r}")
        with self._lock:
            raw = self._load_raw()
            kept = {}
            for day, entry in raw.items():
                d = parse_day(day)
                if d is not None and d.year == int(year) and d.month == month + 1:
                    continue
                kept[day] = entry
            removed = len(raw) - len(kept)
            if removed:
                write_json(self.store, DAILY_LOGS, kept)
        logger.info("deleted %d daily logs for %04d-%02d", removed, int(year), month + 1)
        return removed

    def clear_all(self):
        with self._lock:
            self.store.remove(DAILY_LOGS)
        logger.info("cleared all daily logs")
