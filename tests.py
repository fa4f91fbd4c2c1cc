
import os
import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path

os.environ.setdefault("MEDTRACK_DATA_DIR", tempfile.mkdtemp(prefix="medtrack_test_"))

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

import adherence
from applog import RING, setup_logging
from daily_logs import DailyLogRepository
from errors import CorruptValueError, NotFound, StorageError, ValidationError
from medicines import MedicineRepository
from models import DailyLogEntry, Medicine, MedicineLog, pad_time, parse_day, parse_time
from people import PeopleRepository
from reminders import (FiredSet, SimulatedReminderScheduler, due_doses, next_occurrence, reminder_id,
                       run_once, stable_request_code, sync_all_reminders)
from store import (DAILY_LOGS, MEDICINES, EncryptedFileStore, MemoryStore, aes_decrypt, aes_encrypt,
                   get_or_create_key, read_json, write_json)
from tracker import DoseTracker

JAN1 = date(2024, 1, 1)
JAN2 = date(2024, 1, 2)


def _seeded(medicines, logs=None):
    store = MemoryStore()
    write_json(store, MEDICINES, medicines)
    if logs is not None:
        write_json(store, DAILY_LOGS, logs)
    return store


class TestCrypto(unittest.TestCase):
    def test_aesgcm_roundtrip(self):
        key = AESGCM.generate_key(bit_length=256)
        pt = os.urandom(1024 * 64)
        ct = aes_encrypt(pt, key)
        self.assertNotEqual(pt, ct[12:])
        self.assertEqual(pt, aes_decrypt(ct, key))

    def test_key_file_is_reused(self):
        with tempfile.TemporaryDirectory() as td:
            kp = Path(td) / ".enc_key"
            k1 = get_or_create_key(kp, use_keystore=False)
            k2 = get_or_create_key(kp, use_keystore=False)
            self.assertEqual(len(k1), 32)
            self.assertEqual(k1, k2)


class TestEncryptedStore(unittest.TestCase):
    def test_roundtrip_and_remove(self):
        with tempfile.TemporaryDirectory() as td:
            store = EncryptedFileStore(Path(td), AESGCM.generate_key(bit_length=256))
            self.assertIsNone(store.get("medicines"))
            write_json(store, "medicines", [{"id": 1, "name": "Ibuprofeno"}])
            self.assertNotIn(b"Ibuprofeno", (Path(td) / "medicines.json.aes").read_bytes())
            self.assertEqual(read_json(store, "medicines", []), [{"id": 1, "name": "Ibuprofeno"}])
            self.assertGreater(store.size_bytes(), 0)
            store.remove("medicines")
            self.assertIsNone(store.get("medicines"))

    def test_wrong_key_reads_as_corrupt(self):
        with tempfile.TemporaryDirectory() as td:
            EncryptedFileStore(Path(td), AESGCM.generate_key(bit_length=256)).set("daily_logs", "{}")
            other = EncryptedFileStore(Path(td), AESGCM.generate_key(bit_length=256))
            with self.assertRaises(CorruptValueError):
                other.get("daily_logs")
            self.assertEqual(read_json(other, "daily_logs", {}), {})

    def test_rejects_path_like_keys(self):
        with tempfile.TemporaryDirectory() as td:
            store = EncryptedFileStore(Path(td), AESGCM.generate_key(bit_length=256))
            with self.assertRaises(StorageError):
                store.set("../escape", "x")

    def test_malformed_json_reads_as_default(self):
        store = MemoryStore({MEDICINES: "{not json", DAILY_LOGS: "[1, 2]"})
        self.assertEqual(read_json(store, MEDICINES, []), [])
        self.assertEqual(read_json(store, DAILY_LOGS, {}), {})


class TestModels(unittest.TestCase):
    def test_time_helpers(self):
        self.assertEqual(pad_time("9:5"), "09:05")
        self.assertEqual(pad_time("09:00"), "09:00")
        self.assertEqual(parse_time(" 7:30 "), "07:30")
        for bad in ("24:00", "12:60", "noon", ""):
            with self.assertRaises(ValidationError):
                parse_time(bad)

    def test_parse_day_formats(self):
        self.assertEqual(parse_day("2024-01-15"), date(2024, 1, 15))
        self.assertEqual(parse_day("2024-01-15T08:30:00"), date(2024, 1, 15))
        self.assertEqual(parse_day("Mon Jan 15 2024"), date(2024, 1, 15))
        self.assertIsNone(parse_day("someday"))
        self.assertIsNone(parse_day(None))

    def test_legacy_medicine_keys(self):
        med = Medicine.from_dict({"id": "3", "name": "B", "quantity": 4, "exactTimes": ["8:00"],
                                  "takenTimes": {"08:00": True}, "lastTakenDate": "Mon Jan 01 2024"})
        self.assertEqual(med.id, 3)
        self.assertEqual(med.scheduled_times, ["08:00"])
        self.assertTrue(med.taken_at("8:00"))
        self.assertEqual(parse_day(med.last_reset_date), JAN1)
        self.assertIn("scheduledTimes", med.to_dict())
        self.assertNotIn("exactTimes", med.to_dict())

    def test_legacy_daily_log_keys(self):
        entry = DailyLogEntry.from_dict({"taken": {1: {"name": "A", "takenTimes": {"08:00": True}}}},
                                        date_key="2024-01-01")
        self.assertEqual(entry.date, "2024-01-01")
        self.assertTrue(entry.for_medicine(1).taken_times["08:00"])
        self.assertIs(entry.for_medicine("1"), entry.for_medicine(1))


class TestMedicineRepository(unittest.TestCase):
    def setUp(self):
        self.repo = MedicineRepository(MemoryStore())

    def test_create_assigns_increasing_ids(self):
        a = self.repo.create("A", 10, ["8:00"], today=JAN1)
        b = self.repo.create(" B ", "5", ["20:00", "08:00"], today=JAN1)
        self.assertEqual((a.id, b.id), (1, 2))
        self.assertEqual(a.scheduled_times, ["08:00"])
        self.assertEqual(b.name, "B")
        self.assertEqual(b.quantity, 5)
        self.assertEqual(a.last_reset_date, "2024-01-01")
        self.assertEqual([m.name for m in self.repo.list()], ["A", "B"])

    def test_validation(self):
        with self.assertRaises(ValidationError):
            self.repo.create("", 1, ["08:00"])
        with self.assertRaises(ValidationError):
            self.repo.create("x" * 51, 1, ["08:00"])
        with self.assertRaises(ValidationError):
            self.repo.create("A", 0, ["08:00"])
        with self.assertRaises(ValidationError):
            self.repo.create("A", 1.5, ["08:00"])
        with self.assertRaises(ValidationError):
            self.repo.create("A", 1, [])
        with self.assertRaises(ValidationError):
            self.repo.create("A", 1, ["08:00", "8:00"])
        self.assertEqual(self.repo.list(), [])

    def test_update_merges_and_replaces_taken_map(self):
        med = self.repo.create("A", 10, ["08:00", "20:00"], today=JAN1)
        self.repo.update(med.id, taken_today={"08:00": True, "20:00": True})
        out = self.repo.update(med.id, name="A2", taken_today={"20:00": True})
        self.assertEqual(out.name, "A2")
        self.assertEqual(out.quantity, 10)
        self.assertEqual(out.taken_today, {"20:00": True})
        self.assertEqual(self.repo.get(med.id).taken_today, {"20:00": True})

    def test_update_rejects_empty_stock(self):
        med = self.repo.create("A", 10, ["08:00"])
        for bad in (0, -1, "0"):
            with self.assertRaises(ValidationError):
                self.repo.update(med.id, quantity=bad)
        self.assertEqual(self.repo.get(med.id).quantity, 10)
        self.assertEqual(self.repo.update(med.id, allow_empty_stock=True, quantity=0).quantity, 0)

    def test_update_unknown_and_missing(self):
        med = self.repo.create("A", 10, ["08:00"])
        with self.assertRaises(ValidationError):
            self.repo.update(med.id, colour="red")
        with self.assertRaises(NotFound):
            self.repo.update(99, name="B")
        with self.assertRaises(NotFound):
            self.repo.get(99)

    def test_delete(self):
        med = self.repo.create("A", 10, ["08:00"])
        self.repo.delete(med.id)
        self.assertEqual(self.repo.list(), [])
        with self.assertRaises(NotFound):
            self.repo.delete(med.id)


class TestDailyLogRepository(unittest.TestCase):
    def test_put_get_delete(self):
        logs = DailyLogRepository(MemoryStore())
        self.assertIsNone(logs.get("2024-01-01"))
        entry = DailyLogEntry("2024-01-01", {"1": MedicineLog("A", {"08:00": False})})
        logs.put("2024-01-01", entry)
        self.assertEqual(logs.get("2024-01-01"), entry)
        self.assertTrue(logs.delete("2024-01-01"))
        self.assertFalse(logs.delete("2024-01-01"))

    def test_delete_all_for_month(self):
        logs = DailyLogRepository(MemoryStore())
        for day in ("2023-12-31", "2024-01-15", "2024-02-01"):
            logs.put(day, DailyLogEntry(day))
        self.assertEqual(logs.delete_all_for_month(0, 2024), 1)
        self.assertEqual(sorted(logs.get_all()), ["2023-12-31", "2024-02-01"])
        self.assertEqual(logs.delete_all_for_month(0, 2024), 0)
        with self.assertRaises(ValidationError):
            logs.delete_all_for_month(12, 2024)

    def test_clear_all(self):
        logs = DailyLogRepository(MemoryStore())
        logs.put("2024-01-01", DailyLogEntry("2024-01-01"))
        logs.clear_all()
        self.assertEqual(logs.get_all(), {})


class TestTracker(unittest.TestCase):
    def _tracker(self, medicines=None, logs=None):
        medicines = medicines if medicines is not None else [
            {"id": 1, "name": "A", "scheduledTimes": ["08:00"], "quantity": 10, "takenToday": {}},
        ]
        return DoseTracker(_seeded(medicines, logs))

    def test_rollover_then_toggle(self):
        t = self._tracker()
        t.reconcile(JAN1)
        log = t.logs.get("2024-01-01").for_medicine(1)
        self.assertEqual((log.name, log.taken_times), ("A", {"08:00": False}))

        result = t.toggle_dose(1, "08:00", today=JAN1)
        self.assertTrue(result.taken)
        med = t.medicines.get(1)
        self.assertEqual(med.quantity, 9)
        self.assertEqual(med.taken_today, {"08:00": True})
        self.assertTrue(t.logs.get("2024-01-01").for_medicine(1).taken_times["08:00"])

    def test_rollover_is_idempotent(self):
        t = self._tracker()
        t.reconcile(JAN1)
        t.toggle_dose(1, "08:00", today=JAN1)
        before = (t.medicines.list(), t.logs.get_all())
        t.reconcile(JAN1)
        self.assertEqual((t.medicines.list(), t.logs.get_all()), before)

    def test_new_day_resets_taken_and_keeps_history(self):
        t = self._tracker()
        t.reconcile(JAN1)
        t.toggle_dose(1, "08:00", today=JAN1)
        self.assertTrue(t.needs_reconcile(JAN2))
        t.reconcile(JAN2)
        med = t.medicines.get(1)
        self.assertEqual(med.taken_today, {})
        self.assertEqual(med.last_reset_date, "2024-01-02")
        self.assertFalse(t.logs.get("2024-01-02").for_medicine(1).taken_times["08:00"])
        self.assertTrue(t.logs.get("2024-01-01").for_medicine(1).taken_times["08:00"])
        self.assertFalse(t.needs_reconcile(JAN2))

    def test_untake_has_no_refund(self):
        t = self._tracker()
        t.reconcile(JAN1)
        t.toggle_dose(1, "08:00", today=JAN1)
        result = t.toggle_dose(1, "8:00", today=JAN1)
        self.assertFalse(result.taken)
        self.assertEqual(result.medicine.quantity, 9)
        self.assertEqual(result.medicine.taken_today, {"08:00": False})

    def test_quantity_floors_at_zero(self):
        t = self._tracker([{"id": 1, "name": "A", "scheduledTimes": ["08:00", "20:00"],
                            "quantity": 1, "takenToday": {}}])
        t.reconcile(JAN1)
        t.toggle_dose(1, "08:00", today=JAN1)
        result = t.toggle_dose(1, "20:00", today=JAN1)
        self.assertTrue(result.taken)
        self.assertEqual(result.medicine.quantity, 0)

    def test_toggle_map_covers_every_scheduled_time(self):
        t = self._tracker([{"id": 1, "name": "A", "scheduledTimes": ["08:00", "14:00", "20:00"],
                            "quantity": 5, "takenToday": {}}])
        t.reconcile(JAN1)
        result = t.toggle_dose(1, "14:00", today=JAN1)
        expected = {"08:00": False, "14:00": True, "20:00": False}
        self.assertEqual(result.medicine.taken_today, expected)
        self.assertEqual(result.log_entry.for_medicine(1).taken_times, expected)

    def test_toggle_rejects_unscheduled_time_and_unknown_medicine(self):
        t = self._tracker()
        t.reconcile(JAN1)
        with self.assertRaises(NotFound):
            t.toggle_dose(1, "09:00", today=JAN1)
        with self.assertRaises(NotFound):
            t.toggle_dose(42, "08:00", today=JAN1)
        self.assertEqual(t.medicines.get(1).quantity, 10)

    def test_toggle_ignores_stale_taken_state(self):
        t = self._tracker([{"id": 1, "name": "A", "scheduledTimes": ["08:00"], "quantity": 3,
                            "takenToday": {"08:00": True}, "lastResetDate": "2023-12-31"}])
        result = t.toggle_dose(1, "08:00", today=JAN1)
        self.assertTrue(result.taken)
        self.assertEqual(result.medicine.quantity, 2)

    def test_reconcile_continues_past_failing_medicine(self):
        t = self._tracker([
            {"id": 1, "name": "A", "scheduledTimes": ["08:00"], "quantity": 3, "lastResetDate": "2023-12-31"},
            {"id": 2, "name": "B", "scheduledTimes": ["09:00"], "quantity": 3, "lastResetDate": "2023-12-31"},
        ])
        real_update = t.medicines.update

        def flaky_update(medicine_id, **fields):
            if medicine_id == 1:
                raise StorageError("disk full")
            return real_update(medicine_id, **fields)

        t.medicines.update = flaky_update
        entry = t.reconcile(JAN1)
        self.assertEqual(sorted(entry.per_medicine), ["1", "2"])
        self.assertEqual(t.medicines.get(2).last_reset_date, "2024-01-01")
        self.assertEqual(t.medicines.get(1).last_reset_date, "2023-12-31")

    def test_listeners_are_notified(self):
        t = self._tracker()
        events = []
        t.subscribe(events.append)
        t.reconcile(JAN1)
        t.toggle_dose(1, "08:00", today=JAN1)
        t.unsubscribe(events.append)
        t.reconcile(JAN1)
        self.assertEqual(events, ["daily_logs", "medicines", "daily_logs"])

    def test_edit_cannot_zero_the_stock(self):
        t = self._tracker()
        t.reconcile(JAN1)
        with self.assertRaises(ValidationError):
            t.edit_medicine(1, quantity=0, today=JAN1)
        self.assertEqual(t.medicines.get(1).quantity, 10)

    def test_catalog_glue_syncs_reminders(self):
        scheduler = SimulatedReminderScheduler()
        t = DoseTracker(MemoryStore(), scheduler)
        med = t.add_medicine("A", 10, ["08:00", "20:00"], today=JAN1)
        self.assertEqual(scheduler.list_scheduled(), ["medicine-1-08-00", "medicine-1-20-00"])
        self.assertIn("1", t.logs.get("2024-01-01").per_medicine)

        t.edit_medicine(med.id, scheduled_times=["09:30"], today=JAN1)
        self.assertEqual(scheduler.list_scheduled(), ["medicine-1-09-30"])
        with self.assertRaises(ValidationError):
            t.edit_medicine(med.id, taken_today={})

        t.remove_medicine(med.id)
        self.assertEqual(scheduler.list_scheduled(), [])
        self.assertEqual(t.list_medicines(), [])
        self.assertIn("1", t.logs.get("2024-01-01").per_medicine)


class TestAdherence(unittest.TestCase):
    def setUp(self):
        self.meds = [
            Medicine(1, "A", 10, ["09:00", "21:00"]),
            Medicine(2, "B", 5, ["08:00"]),
        ]
        self.logs = {
            "2024-01-01": DailyLogEntry("2024-01-01", {
                "1": MedicineLog("A", {"9:00": True, "21:00": False}),
                "2": MedicineLog("B", {"08:00": True}),
            }),
            "2024-01-07": DailyLogEntry("2024-01-07", {
                "1": MedicineLog("A", {"09:00": True}),
                "9": MedicineLog("Deleted", {"10:00": True}),
            }),
            "2024-02-01": DailyLogEntry("2024-02-01", {}),
        }

    def test_build_entries_pads_times(self):
        rows = adherence.build_entries(self.logs, self.meds)
        self.assertEqual(len(rows), 9)
        jan1 = {(e.medicine_name, e.time): e.taken for e in rows if e.date == "2024-01-01"}
        self.assertEqual(jan1, {("A", "09:00"): True, ("A", "21:00"): False, ("B", "08:00"): True})
        self.assertNotIn("Deleted", {e.medicine_name for e in rows})

    def test_build_entries_dedups_same_name(self):
        meds = self.meds + [Medicine(3, "A", 1, ["9:00"])]
        rows = adherence.build_entries(self.logs, meds)
        self.assertEqual(len(rows), 9)

    def test_filters(self):
        rows = adherence.build_entries(self.logs, self.meds)
        # 2024-01-07 is a Sunday, 2024-01-01 a Monday
        self.assertEqual({e.date for e in adherence.filter_entries(rows, day_of_week=0)}, {"2024-01-07"})
        self.assertEqual({e.date for e in adherence.filter_entries(rows, day_of_week=1)}, {"2024-01-01"})
        feb = adherence.filter_entries(rows, month=1, year=2024)
        self.assertEqual({e.date for e in feb}, {"2024-02-01"})
        missed = adherence.filter_entries(rows, month=0, status="missed")
        self.assertEqual(len(missed), 3)
        self.assertTrue(all(not e.taken for e in missed))
        with self.assertRaises(ValidationError):
            adherence.filter_entries(rows, status="late")

    def test_sort_and_calendar_order(self):
        rows = adherence.build_entries(self.logs, self.meds)
        by_name = adherence.sort_entries(rows, key="medicine_name", descending=True)
        self.assertEqual(by_name[0].medicine_name, "B")
        ordered = adherence.calendar_order(rows)
        self.assertEqual(ordered[0].date, "2024-02-01")
        self.assertEqual(ordered[-1].date, "2024-01-01")
        with self.assertRaises(ValidationError):
            adherence.sort_entries(rows, key="colour")

    def test_summary_and_percentage(self):
        rows = adherence.build_entries(self.logs, self.meds)
        s = adherence.summarize(rows)
        self.assertEqual((s.total, s.taken_count, s.missed_count, s.percentage), (9, 3, 6, 33))
        self.assertEqual(adherence.summarize([]).percentage, 0)
        self.assertEqual(adherence.percentage(1, 8), 13)
        self.assertEqual(adherence.percentage(0, 0), 0)

    def test_daily_progress(self):
        med = Medicine(1, "A", 3, ["08:00", "20:00"], taken_today={"8:00": True, "12:00": True})
        self.assertEqual(adherence.daily_progress(med), (1, 2))


class TestReminders(unittest.TestCase):
    def test_ids_and_request_codes(self):
        rid = reminder_id(4, "7:05")
        self.assertEqual(rid, "medicine-4-07-05")
        self.assertEqual(stable_request_code(rid), stable_request_code(rid))
        self.assertTrue(0 <= stable_request_code(rid) <= 0x7FFFFFFF)

    def test_next_occurrence(self):
        now = datetime(2024, 1, 1, 8, 0)
        self.assertEqual(next_occurrence("08:00", now), datetime(2024, 1, 2, 8, 0))
        self.assertEqual(next_occurrence("09:15", now), datetime(2024, 1, 1, 9, 15))

    def test_schedule_is_persisted_and_resync_replaces(self):
        store = MemoryStore()
        scheduler = SimulatedReminderScheduler(store)
        scheduler.schedule_daily("medicine-9-10-00", "10:00", "t", "b")
        meds = [Medicine(1, "A", 2, ["08:00"]), Medicine(2, "B", 2, ["09:00", "21:00"])]
        self.assertEqual(sync_all_reminders(scheduler, meds), 3)
        again = SimulatedReminderScheduler(store)
        self.assertEqual(again.list_scheduled(),
                         ["medicine-1-08-00", "medicine-2-09-00", "medicine-2-21-00"])
        self.assertEqual(again.get("medicine-1-08-00").title, "Time for A")
        self.assertEqual(again.cancel_by_prefix("medicine-2-"), 2)
        self.assertEqual(again.list_scheduled(), ["medicine-1-08-00"])


class TestPeople(unittest.TestCase):
    def test_register_patient_alone(self):
        people = PeopleRepository(MemoryStore())
        self.assertIsNone(people.current_patient())
        p = people.register("Ana", "Silva", "5551234")
        self.assertEqual(people.current_patient(), p)
        self.assertEqual(p.full_name, "Ana Silva")
        self.assertIsNone(p.responsible_person_id)

    def test_register_by_responsible_person(self):
        people = PeopleRepository(MemoryStore())
        p = people.register("Ana", "Silva", "5551234", registered_by="responsible",
                            responsible={"first_name": "Rui", "last_name": "Silva",
                                         "phone_number": "5550000"})
        rp = people.get_responsible_person(p.responsible_person_id)
        self.assertEqual(rp.full_name, "Rui Silva")
        self.assertEqual(p.registered_by, "responsible")

    def test_invalid_registration_writes_nothing(self):
        people = PeopleRepository(MemoryStore())
        with self.assertRaises(ValidationError):
            people.register("", "Silva", "1", registered_by="responsible",
                            responsible={"first_name": "Rui", "last_name": "S", "phone_number": "2"})
        with self.assertRaises(ValidationError):
            people.register("Ana", "Silva", "1", registered_by="nurse")
        with self.assertRaises(NotFound):
            people.save_patient("Ana", "Silva", "1", responsible_person_id=7)
        self.assertEqual(people.list_responsible_persons(), [])
        self.assertEqual(people.list_patients(), [])

    def test_unreadable_records_are_skipped(self):
        store = MemoryStore()
        write_json(store, "patients", [
            {"firstName": "NoId"},
            "garbage",
            {"id": 4, "firstName": "Ana", "lastName": "Silva", "phoneNumber": "1"},
        ])
        write_json(store, "responsible_persons", [{"id": "x"}])
        people = PeopleRepository(store)
        self.assertEqual([p.id for p in people.list_patients()], [4])
        self.assertEqual(people.list_responsible_persons(), [])
        self.assertEqual(people.ensure_single_patient().first_name, "Ana")

    def test_ensure_single_patient(self):
        people = PeopleRepository(MemoryStore())
        self.assertIsNone(people.ensure_single_patient())
        people.save_patient("Ana", "Silva", "1")
        self.assertEqual(people.ensure_single_patient().first_name, "Ana")
        people.save_patient("Bia", "Costa", "2")
        self.assertIsNone(people.ensure_single_patient())
        self.assertEqual(people.list_patients(), [])
        self.assertIsNone(people.current_patient())


class TestReminderService(unittest.TestCase):
    def _meds(self):
        return [
            Medicine(1, "A", 4, ["08:00", "12:00"], taken_today={"08:00": True},
                     last_reset_date="2024-01-01"),
            Medicine(2, "B", 2, ["08:00"], last_reset_date="2024-01-01"),
        ]

    def test_due_doses_skips_taken_and_far_times(self):
        due = due_doses(self._meds(), datetime(2024, 1, 1, 7, 59, 30))
        self.assertEqual([(d["medicine_id"], d["time"]) for d in due], [(2, "08:00")])

    def test_stale_taken_state_is_due_again(self):
        due = due_doses(self._meds(), datetime(2024, 1, 2, 8, 0, 10))
        self.assertEqual({d["medicine_id"] for d in due}, {1, 2})

    def test_fired_set_notifies_once_per_day(self):
        fired = FiredSet()
        dose = {"medicine_id": 2, "date": "2024-01-01", "time": "08:00"}
        self.assertTrue(fired.first_time(dose, JAN1))
        self.assertFalse(fired.first_time(dose, JAN1))
        self.assertTrue(fired.first_time(dose, JAN2))

    def test_run_once(self):
        repo = MedicineRepository(MemoryStore())
        repo.create("A", 3, ["08:00"], today=JAN1)
        fired = FiredSet()
        now = datetime(2024, 1, 1, 8, 0, 5)
        self.assertEqual(run_once(repo, fired, now), 1)
        self.assertEqual(run_once(repo, fired, now), 0)


class TestLogging(unittest.TestCase):
    def test_ring_buffer_receives_records(self):
        with tempfile.TemporaryDirectory() as td:
            log = setup_logging(Path(td) / "app.log")
            log.info("ring check %s", "ok")
            self.assertIn("ring check ok", RING.text())


if __name__ == "__main__":
    unittest.main(verbosity=2)
