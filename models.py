# models.py
# Domain records and the time/date helpers every other module relies on.
#
# On disk the records keep camelCase keys. Legacy keys written by older builds
# (exactTimes, takenTimes, lastTakenDate, "taken" for daily logs) are accepted
# on read and never written back.

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from errors import ValidationError

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{1,2})\s*$")


# -------------------------
# Time / date helpers
# -------------------------
def pad_time(t: str) -> str:
    """'9:5' -> '09:05'. Strings without a colon are returned stripped."""
    s = str(t).strip()
    if ":" not in s:
        return s
    h, m = s.split(":", 1)
    return f"{h.strip().zfill(2)}:{m.strip().zfill(2)}"


def parse_time(t: str) -> str:
    m = _TIME_RE.match(str(t))
    if not m:
        raise ValidationError(f"invalid time {t!r}, expected HH:MM")
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(f"invalid time {t!r}, out of range")
    return f"{hour:02d}:{minute:02d}"


def normalize_times(times) -> List[str]:
    if isinstance(times, str) or not times:
        raise ValidationError("at least one scheduled time is required")
    out: List[str] = []
    for t in times:
        hm = parse_time(t)
        if hm in out:
            raise ValidationError(f"duplicate scheduled time {hm}")
        out.append(hm)
    return out


def iso_date(d: Optional[date] = None) -> str:
    return (d or date.today()).isoformat()


def parse_day(value: Any) -> Optional[date]:
    """Calendar day of a stored date value; None when absent or unreadable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        pass
    # "Mon Jan 01 2024" (toDateString format of older builds)
    try:
        return datetime.strptime(s, "%a %b %d %Y").date()
    except ValueError:
        return None


def now_stamp() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _bool_map(raw: Any) -> Dict[str, bool]:
    if not isinstance(raw, dict):
        return {}
    return {str(k): v is True for k, v in raw.items()}


# -------------------------
# Medicine
# -------------------------
@dataclass
class Medicine:
    id: int
    name: str
    quantity: int
    scheduled_times: List[str]
    taken_today: Dict[str, bool] = field(default_factory=dict)
    last_reset_date: Optional[str] = None
    photo: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def taken_at(self, t: str) -> bool:
        return self.taken_today.get(pad_time(t)) is True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "scheduledTimes": list(self.scheduled_times),
            "takenToday": dict(self.taken_today),
            "lastResetDate": self.last_reset_date,
            "photo": self.photo,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Medicine":
        times = d.get("scheduledTimes")
        if times is None:
            times = d.get("exactTimes") or []
        taken = d.get("takenToday")
        if taken is None:
            taken = d.get("takenTimes")
        last_reset = d.get("lastResetDate")
        if last_reset is None:
            last_reset = d.get("lastTakenDate")
        return cls(
            id=int(d["id"]),
            name=str(d.get("name") or ""),
            quantity=int(d.get("quantity") or 0),
            scheduled_times=[pad_time(t) for t in times],
            taken_today=_bool_map(taken),
            last_reset_date=last_reset,
            photo=d.get("photo"),
            created_at=d.get("createdAt") or "",
            updated_at=d.get("updatedAt") or "",
        )


# -------------------------
# Daily log
# -------------------------
@dataclass
class MedicineLog:
    name: str
    taken_times: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "takenTimes": dict(self.taken_times)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MedicineLog":
        return cls(name=str(d.get("name") or ""), taken_times=_bool_map(d.get("takenTimes")))


@dataclass
class DailyLogEntry:
    date: str
    per_medicine: Dict[str, MedicineLog] = field(default_factory=dict)

    def for_medicine(self, medicine_id) -> Optional[MedicineLog]:
        return self.per_medicine.get(str(medicine_id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "perMedicine": {k: v.to_dict() for k, v in self.per_medicine.items()},
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any], date_key: Optional[str] = None) -> "DailyLogEntry":
        raw = d.get("perMedicine")
        if raw is None:
            raw = d.get("taken")
        per_medicine = {}
        if isinstance(raw, dict):
            for mid, med_log in raw.items():
                if isinstance(med_log, dict):
                    per_medicine[str(mid)] = MedicineLog.from_dict(med_log)
        return cls(date=str(d.get("date") or date_key or ""), per_medicine=per_medicine)


# -------------------------
# People
# -------------------------
REGISTERED_BY = ("patient", "responsible")


@dataclass
class ResponsiblePerson:
    id: int
    first_name: str
    last_name: str
    phone_number: str
    created_at: str = ""
    updated_at: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ResponsiblePerson":
        return cls(
            id=int(d["id"]),
            first_name=d.get("firstName") or "",
            last_name=d.get("lastName") or "",
            phone_number=d.get("phoneNumber") or "",
            created_at=d.get("createdAt") or "",
            updated_at=d.get("updatedAt") or "",
        )


@dataclass
class Patient:
    id: int
    first_name: str
    last_name: str
    phone_number: str
    registered_by: str = "patient"
    responsible_person_id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "registeredBy": self.registered_by,
            "responsiblePersonId": self.responsible_person_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Patient":
        rp = d.get("responsiblePersonId")
        return cls(
            id=int(d["id"]),
            first_name=d.get("firstName") or "",
            last_name=d.get("lastName") or "",
            phone_number=d.get("phoneNumber") or "",
            registered_by=d.get("registeredBy") or "patient",
            responsible_person_id=int(rp) if rp is not None else None,
            created_at=d.get("createdAt") or "",
            updated_at=d.get("updatedAt") or "",
        )


# -------------------------
# Adherence views
# -------------------------
@dataclass(frozen=True)
class AdherenceEntry:
    date: str
    medicine_name: str
    time: str
    taken: bool


@dataclass(frozen=True)
class AdherenceSummary:
    total: int
    taken_count: int
    missed_count: int
    percentage: int


def next_id(records) -> int:
    ids = [int(r["id"] if isinstance(r, dict) else r.id) for r in records]
    return max(ids) + 1 if ids else 1
