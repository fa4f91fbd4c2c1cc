# medicines.py
# Medicine catalog: the only writer of the "medicines" collection.

import logging
from datetime import date
from threading import RLock
from typing import Any, Dict, List, Optional

from config import MAX_MEDICINE_NAME
from errors import NotFound, ValidationError
from models import Medicine, iso_date, next_id, normalize_times, now_stamp
from store import MEDICINES, KeyValueStore, read_json, write_json

logger = logging.getLogger("medtrack.medicines")

UPDATABLE_FIELDS = ("name", "quantity", "scheduled_times", "taken_today",
                    "last_reset_date", "photo")


def validate_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("medicine name is required")
    name = name.strip()
    if len(name) > MAX_MEDICINE_NAME:
        raise ValidationError(f"medicine name must be at most {MAX_MEDICINE_NAME} characters")
    return name


def validate_quantity(quantity) -> int:
    if isinstance(quantity, bool):
        raise ValidationError("quantity must be a positive integer")
    try:
        q = int(quantity)
    except (TypeError, ValueError):
        raise ValidationError("quantity must be a positive integer") from None
    if q != quantity and not isinstance(quantity, str):
        raise ValidationError("quantity must be a positive integer")
    if q <= 0:
        raise ValidationError("quantity must be a positive integer")
    return q


class MedicineRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store
        self._lock = RLock()

    def _load(self) -> List[Medicine]:
        meds = []
        for raw in read_json(self.store, MEDICINES, []):
            try:
                meds.append(Medicine.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("skipping unreadable medicine record %r", raw)
        return meds

    def _save(self, medicines: List[Medicine]):
        write_json(self.store, MEDICINES, [m.to_dict() for m in medicines])

    def list(self) -> List[Medicine]:
        with self._lock:
            return self._load()

    def get(self, medicine_id: int) -> Medicine:
        for m in self.list():
            if m.id == int(medicine_id):
                return m
        raise NotFound(f"medicine {medicine_id} not found")

    def create(self, name: str, quantity: int, scheduled_times,
               photo: Optional[str] = None, today: Optional[date] = None) -> Medicine:
        name = validate_name(name)
        quantity = validate_quantity(quantity)
        times = normalize_times(scheduled_times)
        with self._lock:
            medicines = self._load()
            stamp = now_stamp()
            med = Medicine(
                id=next_id(medicines),
                name=name,
                quantity=quantity,
                scheduled_times=times,
                taken_today={},
                last_reset_date=iso_date(today),
                photo=photo,
                created_at=stamp,
                updated_at=stamp,
            )
            medicines.append(med)
            self._save(medicines)
        logger.info("added medicine id=%s %s times=%s", med.id, med.name, times)
        return med

    def update(self, medicine_id: int, allow_empty_stock: bool = False, **fields: Any) -> Medicine:
        """Merge the supplied fields into the stored medicine.

        taken_today and last_reset_date are replaced wholesale when supplied,
        never merged key by key. quantity must stay positive unless
        allow_empty_stock is set (dose-taking may run the stock down to 0).
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"unknown medicine fields: {', '.join(sorted(unknown))}")

        clean: Dict[str, Any] = {}
        if "name" in fields:
            clean["name"] = validate_name(fields["name"])
        if "quantity" in fields:
            q = fields["quantity"]
            if allow_empty_stock and isinstance(q, int) and not isinstance(q, bool) and q == 0:
                clean["quantity"] = 0
            else:
                clean["quantity"] = validate_quantity(q)
        if "scheduled_times" in fields:
            clean["scheduled_times"] = normalize_times(fields["scheduled_times"])
        if "taken_today" in fields:
            taken = fields["taken_today"]
            clean["taken_today"] = {str(k): v is True for k, v in (taken or {}).items()}
        if "last_reset_date" in fields:
            lrd = fields["last_reset_date"]
            clean["last_reset_date"] = lrd.isoformat() if isinstance(lrd, date) else lrd
        if "photo" in fields:
            clean["photo"] = fields["photo"]

        with self._lock:
            medicines = self._load()
            for i, med in enumerate(medicines):
                if med.id == int(medicine_id):
                    break
            else:
                raise NotFound(f"medicine {medicine_id} not found")
            for k, v in clean.items():
                setattr(med, k, v)
            med.updated_at = now_stamp()
            medicines[i] = med
            self._save(medicines)
        return med

    def delete(self, medicine_id: int):
        with self._lock:
            medicines = self._load()
            kept = [m for m in medicines if m.id != int(medicine_id)]
            if len(kept) == len(medicines):
                raise NotFound(f"medicine {medicine_id} not found")
            self._save(kept)
        logger.info("deleted medicine id=%s", medicine_id)
