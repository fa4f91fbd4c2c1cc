# reminders.py
# Daily dose reminders. The tracker only talks to ReminderScheduler
# (schedule_daily / cancel_by_prefix / list_scheduled); the Android subclass
# turns that into AlarmManager broadcasts to the generated AlarmReceiver.

import hashlib
import logging
import os
import time
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from threading import RLock
from typing import Dict, Iterable, List, Optional, Tuple

from config import (JAVA_ALARM_RECEIVER, NOTIFICATION_CHANNEL_ID, NOTIFICATION_CHANNEL_NAME,
                    REMINDER_INTERVAL_MS, REMINDER_PREFIX, SERVICE_WINDOW_SECONDS)
from errors import MedTrackError
from models import Medicine, parse_day, parse_time
from store import SCHEDULED_REMINDERS, KeyValueStore, MemoryStore, read_json, write_json

try:
    from jnius import autoclass, cast
except Exception:
    autoclass = None
    cast = None

logger = logging.getLogger("medtrack.reminders")

_SCHEDULE_LOCK = RLock()


@dataclass
class Reminder:
    id: str
    at_time: str
    title: str
    body: str
    request_code: int


def reminder_prefix(medicine_id: int) -> str:
    return f"{REMINDER_PREFIX}{medicine_id}-"


def reminder_id(medicine_id: int, at_time: str) -> str:
    return f"{reminder_prefix(medicine_id)}{parse_time(at_time).replace(':', '-')}"


def stable_request_code(rid: str) -> int:
    h = hashlib.sha256(rid.encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big") & 0x7FFFFFFF


def next_occurrence(at_time: str, now: Optional[datetime] = None) -> datetime:
    """Next wall-clock moment at HH:MM strictly after `now`."""
    now = now or datetime.now()
    h, m = map(int, parse_time(at_time).split(":"))
    dt = now.replace(hour=h, minute=m, second=0, microsecond=0)
    if dt <= now:
        dt += timedelta(days=1)
    return dt


class ReminderScheduler:
    """Keeps the set of armed reminders; subclasses do the platform arming."""

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store if store is not None else MemoryStore()

    def _load(self) -> Dict[str, Reminder]:
        out = {}
        for d in read_json(self.store, SCHEDULED_REMINDERS, []):
            try:
                r = Reminder(**d)
            except TypeError:
                logger.warning("dropping unreadable reminder record %r", d)
                continue
            out[r.id] = r
        return out

    def _save(self, reminders: Dict[str, Reminder]):
        write_json(self.store, SCHEDULED_REMINDERS, [asdict(r) for r in reminders.values()])

    def _arm(self, reminder: Reminder):
        raise NotImplementedError

    def _disarm(self, reminder: Reminder):
        raise NotImplementedError

    def schedule_daily(self, rid: str, at_time: str, title: str, body: str) -> Reminder:
        reminder = Reminder(rid, parse_time(at_time), title, body, stable_request_code(rid))
        with _SCHEDULE_LOCK:
            reminders = self._load()
            if rid in reminders:
                self._disarm(reminders[rid])
            self._arm(reminder)
            reminders[rid] = reminder
            self._save(reminders)
        return reminder

    def cancel_by_prefix(self, prefix: str) -> int:
        with _SCHEDULE_LOCK:
            reminders = self._load()
            doomed = [r for rid, r in reminders.items() if rid.startswith(prefix)]
            for r in doomed:
                self._disarm(r)
                del reminders[r.id]
            if doomed:
                self._save(reminders)
        return len(doomed)

    def list_scheduled(self) -> List[str]:
        return sorted(self._load())

    def get(self, rid: str) -> Optional[Reminder]:
        return self._load().get(rid)


class SimulatedReminderScheduler(ReminderScheduler):
    """Desktop: reminders are only recorded and logged."""

    def _arm(self, reminder):
        logger.info("[Simulated reminder] %s daily @ %s - %s",
                    reminder.id, reminder.at_time, reminder.body)

    def _disarm(self, reminder):
        logger.info("[Simulated reminder] cancelled %s", reminder.id)


# -------------------------
# Android runtime permissions & AlarmManager scheduling
# -------------------------
def _android_ready() -> bool:
    return autoclass is not None and "ANDROID_ARGUMENT" in os.environ


def android_sdk_int() -> int:
    if not _android_ready():
        return 0
    try:
        BuildVERSION = autoclass("android.os.Build$VERSION")
        return int(BuildVERSION.SDK_INT)
    except Exception:
        return 0


def ensure_notification_permission():
    """Android 13+ needs POST_NOTIFICATIONS at runtime; failure is logged only."""
    if not _android_ready() or android_sdk_int() < 33:
        return
    try:
        PythonActivity = autoclass("org.kivy.android.PythonActivity")
        activity = PythonActivity.mActivity
        ContextCompat = autoclass("androidx.core.content.ContextCompat")
        ActivityCompat = autoclass("androidx.core.app.ActivityCompat")
        PackageManager = autoclass("android.content.pm.PackageManager")
        Manifest = autoclass("android.Manifest")

        perm = Manifest.permission.POST_NOTIFICATIONS
        if ContextCompat.checkSelfPermission(activity, perm) != PackageManager.PERMISSION_GRANTED:
            ActivityCompat.requestPermissions(activity, [perm], 2407)
            logger.info("requested POST_NOTIFICATIONS permission")
    except Exception:
        logger.exception("POST_NOTIFICATIONS request failed")


def _alarm_manager(ctx):
    Context = autoclass("android.content.Context")
    AlarmManager = autoclass("android.app.AlarmManager")
    return AlarmManager, cast(AlarmManager, ctx.getSystemService(Context.ALARM_SERVICE))


def can_schedule_exact_alarms() -> bool:
    if not _android_ready():
        return False
    if android_sdk_int() < 31:
        return True
    try:
        activity = autoclass("org.kivy.android.PythonActivity").mActivity
        _, am = _alarm_manager(activity)
        return bool(am.canScheduleExactAlarms())
    except Exception:
        logger.exception("canScheduleExactAlarms check failed")
        return False


class AndroidAlarmScheduler(ReminderScheduler):
    """AlarmManager broadcasts; AlarmReceiver re-arms itself every interval_ms."""

    def _context(self):
        activity = autoclass("org.kivy.android.PythonActivity").mActivity
        return activity.getApplicationContext()

    def _pending_intent(self, ctx, reminder: Reminder, extras: bool):
        Intent = autoclass("android.content.Intent")
        PendingIntent = autoclass("android.app.PendingIntent")
        intent = Intent()
        intent.setClassName(ctx, JAVA_ALARM_RECEIVER)
        if extras:
            intent.putExtra("reminder_id", reminder.id)
            intent.putExtra("title", reminder.title)
            intent.putExtra("body", reminder.body)
            intent.putExtra("request_code", int(reminder.request_code))
            intent.putExtra("interval_ms", int(REMINDER_INTERVAL_MS))
        flags = PendingIntent.FLAG_UPDATE_CURRENT
        if android_sdk_int() >= 23:
            flags |= PendingIntent.FLAG_IMMUTABLE
        return PendingIntent.getBroadcast(ctx, int(reminder.request_code), intent, int(flags))

    def _arm(self, reminder):
        try:
            ctx = self._context()
            AlarmManager, am = _alarm_manager(ctx)
            pi = self._pending_intent(ctx, reminder, extras=True)
            at = next_occurrence(reminder.at_time)
            trigger_ms = int(at.timestamp() * 1000)
            if android_sdk_int() >= 23:
                if can_schedule_exact_alarms():
                    am.setExactAndAllowWhileIdle(AlarmManager.RTC_WAKEUP, trigger_ms, pi)
                    logger.info("alarm exact+idle %s rc=%s @ %s", reminder.id, reminder.request_code, at)
                else:
                    am.setAndAllowWhileIdle(AlarmManager.RTC_WAKEUP, trigger_ms, pi)
                    logger.info("alarm idle(fallback) %s rc=%s @ %s", reminder.id, reminder.request_code, at)
            else:
                am.setExact(AlarmManager.RTC_WAKEUP, trigger_ms, pi)
                logger.info("alarm exact %s rc=%s @ %s", reminder.id, reminder.request_code, at)
        except Exception:
            logger.exception("alarm scheduling failed for %s", reminder.id)

    def _disarm(self, reminder):
        try:
            ctx = self._context()
            _, am = _alarm_manager(ctx)
            pi = self._pending_intent(ctx, reminder, extras=False)
            am.cancel(pi)
            pi.cancel()
        except Exception:
            logger.exception("alarm cancel failed for %s", reminder.id)


# -------------------------
# Medicine glue
# -------------------------
def reminder_text(medicine: Medicine):
    title = f"Time for {medicine.name}"
    body = f"Take your dose now. Remaining: {medicine.quantity}."
    return title, body


def sync_medicine_reminders(scheduler: ReminderScheduler, medicine: Medicine) -> List[str]:
    """Cancel this medicine's reminders and arm one per scheduled time."""
    scheduler.cancel_by_prefix(reminder_prefix(medicine.id))
    title, body = reminder_text(medicine)
    ids = []
    for t in medicine.scheduled_times:
        rid = reminder_id(medicine.id, t)
        scheduler.schedule_daily(rid, t, title, body)
        ids.append(rid)
    return ids


def sync_all_reminders(scheduler: ReminderScheduler, medicines: Iterable[Medicine]) -> int:
    """Rebuild every medicine reminder from scratch; safe to repeat."""
    scheduler.cancel_by_prefix(REMINDER_PREFIX)
    count = 0
    for med in medicines:
        count += len(sync_medicine_reminders(scheduler, med))
    logger.info("resynced %d reminders", count)
    return count


# -------------------------
# Due-dose polling (background service and desktop)
# -------------------------
def due_doses(medicines: Iterable[Medicine], now: datetime,
              window_seconds: int = SERVICE_WINDOW_SECONDS) -> List[Dict]:
    """Doses scheduled within [now - 20s, now + window] that are still untaken today."""
    today = now.date()
    out = []
    for med in medicines:
        fresh = parse_day(med.last_reset_date) == today
        for t in med.scheduled_times:
            try:
                hm = parse_time(t)
            except MedTrackError:
                continue
            h, m = map(int, hm.split(":"))
            at = now.replace(hour=h, minute=m, second=0, microsecond=0)
            diff = (at - now).total_seconds()
            if not -20 <= diff <= window_seconds:
                continue
            if fresh and med.taken_today.get(hm) is True:
                continue
            out.append({
                "medicine_id": med.id,
                "name": med.name,
                "time": hm,
                "date": today.isoformat(),
                "quantity": med.quantity,
            })
    return out


class FiredSet:
    """Remembers (medicine, date, time) already notified; forgets other days."""

    def __init__(self):
        self._fired = set()
        self._day: Optional[date] = None

    def first_time(self, dose: Dict, today: date) -> bool:
        if self._day != today:
            self._fired.clear()
            self._day = today
        k: Tuple = (dose["medicine_id"], dose["date"], dose["time"])
        if k in self._fired:
            return False
        self._fired.add(k)
        return True


def notify(title: str, text: str):
    if not _android_ready():
        logger.info("[Simulated notification] %s - %s", title, text)
        return
    try:
        PythonService = autoclass("org.kivy.android.PythonService")
        service = PythonService.mService
        Context = autoclass("android.content.Context")
        NotificationManager = autoclass("android.app.NotificationManager")
        NotificationChannel = autoclass("android.app.NotificationChannel")
        Notification = autoclass("android.app.Notification")

        nm = service.getSystemService(Context.NOTIFICATION_SERVICE)
        if android_sdk_int() >= 26:
            ch = NotificationChannel(NOTIFICATION_CHANNEL_ID, NOTIFICATION_CHANNEL_NAME,
                                     NotificationManager.IMPORTANCE_HIGH)
            ch.setDescription("Medicine reminders")
            nm.createNotificationChannel(ch)
            builder = Notification.Builder(service, NOTIFICATION_CHANNEL_ID)
        else:
            builder = Notification.Builder(service)

        builder.setContentTitle(title)
        builder.setContentText(text)
        builder.setSmallIcon(service.getApplicationInfo().icon)
        builder.setAutoCancel(True)

        nid = int(time.time()) & 0x7fffffff
        nm.notify(nid, builder.build())
    except Exception:
        logger.exception("notification failed")


def run_once(repo, fired: FiredSet, now: Optional[datetime] = None) -> int:
    """Notify every due dose of `repo`'s medicines not yet notified today."""
    now = now or datetime.now()
    sent = 0
    for dose in due_doses(repo.list(), now):
        if fired.first_time(dose, now.date()):
            notify(f"Time for {dose['name']}",
                   f"Dose at {dose['time']}. Remaining: {dose['quantity']}.")
            sent += 1
    return sent
