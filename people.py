# people.py
# Patient registration: the patient themself, or a responsible person (caregiver)
# registering on their behalf. Only one patient is expected per device.

import logging
from typing import List, Optional

from errors import NotFound, ValidationError
from models import REGISTERED_BY, Patient, ResponsiblePerson, next_id, now_stamp
from store import (CURRENT_PATIENT_ID, PATIENTS, RESPONSIBLE_PERSONS, KeyValueStore,
                   read_json, write_json)

logger = logging.getLogger("medtrack.people")


def _required(value, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    return value.strip()


class PeopleRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self, key: str, record_cls):
        out = []
        for raw in read_json(self.store, key, []):
            try:
                out.append(record_cls.from_dict(raw))
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.warning("skipping unreadable %s record %r", key, raw)
        return out

    # Responsible persons
    def list_responsible_persons(self) -> List[ResponsiblePerson]:
        return self._load(RESPONSIBLE_PERSONS, ResponsiblePerson)

    def save_responsible_person(self, first_name: str, last_name: str,
                                phone_number: str) -> ResponsiblePerson:
        people = self.list_responsible_persons()
        stamp = now_stamp()
        person = ResponsiblePerson(
            id=next_id(people),
            first_name=_required(first_name, "first name"),
            last_name=_required(last_name, "last name"),
            phone_number=_required(phone_number, "phone number"),
            created_at=stamp,
            updated_at=stamp,
        )
        people.append(person)
        write_json(self.store, RESPONSIBLE_PERSONS, [p.to_dict() for p in people])
        return person

    def get_responsible_person(self, person_id: int) -> Optional[ResponsiblePerson]:
        return next((p for p in self.list_responsible_persons() if p.id == int(person_id)), None)

    def delete_all_responsible_persons(self):
        self.store.remove(RESPONSIBLE_PERSONS)

    # Patients
    def list_patients(self) -> List[Patient]:
        return self._load(PATIENTS, Patient)

    def save_patient(self, first_name: str, last_name: str, phone_number: str,
                     registered_by: str = "patient",
                     responsible_person_id: Optional[int] = None) -> Patient:
        if registered_by not in REGISTERED_BY:
            raise ValidationError(f"registered_by must be one of {REGISTERED_BY}")
        if responsible_person_id is not None and self.get_responsible_person(responsible_person_id) is None:
            raise NotFound(f"responsible person {responsible_person_id} does not exist")
        patients = self.list_patients()
        stamp = now_stamp()
        patient = Patient(
            id=next_id(patients),
            first_name=_required(first_name, "first name"),
            last_name=_required(last_name, "last name"),
            phone_number=_required(phone_number, "phone number"),
            registered_by=registered_by,
            responsible_person_id=responsible_person_id,
            created_at=stamp,
            updated_at=stamp,
        )
        patients.append(patient)
        write_json(self.store, PATIENTS, [p.to_dict() for p in patients])
        return patient

    def delete_all_patients(self):
        self.store.remove(PATIENTS)

    # Current patient pointer
    def set_current_patient(self, patient_id: int):
        self.store.set(CURRENT_PATIENT_ID, str(int(patient_id)))

    def clear_current_patient(self):
        self.store.remove(CURRENT_PATIENT_ID)

    def current_patient(self) -> Optional[Patient]:
        raw = self.store.get(CURRENT_PATIENT_ID)
        if not raw:
            return None
        return next((p for p in self.list_patients() if str(p.id) == raw.strip()), None)

    def ensure_single_patient(self) -> Optional[Patient]:
        """Return the registered patient, wiping the table if it holds several."""
        patients = self.list_patients()
        if len(patients) == 1:
            self.set_current_patient(patients[0].id)
            return patients[0]
        if len(patients) > 1:
            logger.warning("found %d patients on device; clearing registration", len(patients))
            self.delete_all_patients()
            self.clear_current_patient()
        return None

    def register(self, first_name: str, last_name: str, phone_number: str,
                 registered_by: str = "patient", responsible: Optional[dict] = None) -> Patient:
        if registered_by not in REGISTERED_BY:
            raise ValidationError(f"registered_by must be one of {REGISTERED_BY}")
        for value, label in ((first_name, "first name"), (last_name, "last name"),
                             (phone_number, "phone number")):
            _required(value, label)
        responsible_id = None
        if registered_by == "responsible":
            if not responsible:
                raise ValidationError("responsible person details are required")
            person = self.save_responsible_person(
                responsible.get("first_name"),
                responsible.get("last_name"),
                responsible.get("phone_number"),
            )
            responsible_id = person.id
        patient = self.save_patient(first_name, last_name, phone_number,
                                    registered_by=registered_by,
                                    responsible_person_id=responsible_id)
        self.set_current_patient(patient.id)
        logger.info("registered patient id=%s by=%s", patient.id, registered_by)
        return patient

    def delete_all(self):
        self.delete_all_patients()
        self.delete_all_responsible_persons()
        self.clear_current_patient()
