# main.py
# MedTrack (KivyMD): daily medicine doses, adherence history, encrypted
# on-device store, Android AlarmManager reminders.
#
# - Run normally:            python main.py
# - Generate Android Java + manifest injection files for Buildozer:
#                            python main.py --gen-android
#
# Buildozer notes (in buildozer.spec):
#   requirements = python3,kivy,kivymd,pyjnius,cryptography
#   android.api = 34
#   android.minapi = 24
#   android.permissions = POST_NOTIFICATIONS,SCHEDULE_EXACT_ALARM,RECEIVE_BOOT_COMPLETED,WAKE_LOCK,VIBRATE
#   android.add_src = android_src
#   android.extra_manifest_xml = android_src/extra_manifest.xml

import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from kivy.clock import Clock
from kivy.core.window import Window
from kivy.lang import Builder
from kivy.utils import platform as _kivy_platform

from kivymd.app import MDApp
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDFlatButton, MDIconButton, MDRaisedButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.label import MDLabel
from kivymd.uix.list import IconLeftWidget, TwoLineIconListItem
from kivymd.uix.pickers import MDTimePicker
from kivymd.uix.textfield import MDTextField

import adherence
from applog import RING, clear_log, logger, setup_logging
from config import (BASE_DIR, JAVA_PACKAGE, KEY_PATH, LOG_PATH, MAX_MEDICINE_NAME, NOTIFICATION_CHANNEL_ID,
                    NOTIFICATION_CHANNEL_NAME, SERVICE_POLL_SECONDS, STORE_DIR)
from errors import MedTrackError
from people import PeopleRepository
from reminders import (AndroidAlarmScheduler, FiredSet, SimulatedReminderScheduler, can_schedule_exact_alarms,
                       ensure_notification_permission, run_once)
from store import open_store
from tracker import DoseTracker

if _kivy_platform != "android" and hasattr(Window, "size"):
    Window.size = (420, 760)

KV = """
MDScreen:
    MDBoxLayout:
        orientation: "vertical"

        MDTopAppBar:
            title: "MedTrack"
            elevation: 4
            right_action_items: [["refresh", lambda x: app.refresh_all()]]

        ScreenManager:
            id: screen_manager

            MDScreen:
                name: "today"
                MDBoxLayout:
                    orientation: "vertical"
                    padding: "12dp"
                    spacing: "10dp"
                    MDLabel:
                        id: today_header
                        text: "-"
                        bold: True
                        font_style: "H6"
                        size_hint_y: None
                        height: "36dp"
                    MDLabel:
                        id: today_progress
                        text: "-"
                        theme_text_color: "Secondary"
                        size_hint_y: None
                        height: "24dp"
                    ScrollView:
                        MDList:
                            id: today_list
                    MDBoxLayout:
                        size_hint_y: None
                        height: "54dp"
                        spacing: "10dp"
                        MDRaisedButton:
                            text: "Add Medicine"
                            on_release: app.show_medicine_dialog()
                        MDRaisedButton:
                            text: "Resync Reminders"
                            on_release: app.resync_reminders()

            MDScreen:
                name: "medicines"
                MDBoxLayout:
                    orientation: "vertical"
                    padding: "12dp"
                    spacing: "10dp"
                    MDLabel:
                        id: med_count
                        text: "-"
                        bold: True
                        size_hint_y: None
                        height: "32dp"
                    ScrollView:
                        MDList:
                            id: medicines_list

            MDScreen:
                name: "history"
                MDBoxLayout:
                    orientation: "vertical"
                    padding: "12dp"
                    spacing: "10dp"
                    MDLabel:
                        id: hist_summary
                        text: "-"
                        bold: True
                        size_hint_y: None
                        height: "32dp"
                    MDBoxLayout:
                        size_hint_y: None
                        height: "48dp"
                        spacing: "8dp"
                        MDFlatButton:
                            text: "All"
                            on_release: app.set_history_status("all")
                        MDFlatButton:
                            text: "Taken"
                            on_release: app.set_history_status("taken")
                        MDFlatButton:
                            text: "Missed"
                            on_release: app.set_history_status("missed")
                        MDFlatButton:
                            text: "This month"
                            on_release: app.toggle_history_month()
                    ScrollView:
                        MDList:
                            id: history_list

            MDScreen:
                name: "settings"
                MDBoxLayout:
                    orientation: "vertical"
                    padding: "12dp"
                    spacing: "10dp"
                    MDLabel:
                        id: profile
                        text: "-"
                        size_hint_y: None
                        height: "48dp"
                    MDLabel:
                        id: db_status
                        text: "-"
                        theme_text_color: "Secondary"
                        size_hint_y: None
                        height: "36dp"
                    ScrollView:
                        MDLabel:
                            id: debug_log
                            text: ""
                            size_hint_y: None
                            height: self.texture_size[1]
                    MDBoxLayout:
                        spacing: "8dp"
                        size_hint_y: None
                        height: "48dp"
                        MDRaisedButton:
                            text: "Refresh Log"
                            on_release: app.refresh_log()
                        MDRaisedButton:
                            text: "Clear Log"
                            on_release: app.clear_log()
                    MDBoxLayout:
                        spacing: "8dp"
                        size_hint_y: None
                        height: "48dp"
                        MDRaisedButton:
                            text: "Delete Month Logs"
                            on_release: app.confirm_delete_month()
                        MDRaisedButton:
                            text: "Clear All Logs"
                            on_release: app.confirm_clear_logs()
                        MDRaisedButton:
                            text: "Reset Profile"
                            on_release: app.confirm_reset_profile()

        MDBottomNavigation:
            size_hint_y: None
            height: "56dp"
            MDBottomNavigationItem:
                name: "nav_today"
                text: "Today"
                icon: "pill"
                on_tab_press: app.switch_screen("today")
            MDBottomNavigationItem:
                name: "nav_medicines"
                text: "Medicines"
                icon: "format-list-bulleted"
                on_tab_press: app.switch_screen("medicines")
            MDBottomNavigationItem:
                name: "nav_history"
                text: "History"
                icon: "calendar-check"
                on_tab_press: app.switch_screen("history")
            MDBottomNavigationItem:
                name: "nav_settings"
                text: "Settings"
                icon: "cog"
                on_tab_press: app.switch_screen("settings")
"""

# -------------------------
# Android source generator (Buildozer)
# -------------------------
JAVA_ALARM_RECEIVER_SRC = r"""
package {JAVA_PACKAGE};

import android.app.AlarmManager;
import android.app.Notification;
import android.app.NotificationChannel;
import android.app.NotificationManager;
import android.app.PendingIntent;
import android.content.BroadcastReceiver;
import android.content.Context;
import android.content.Intent;
import android.os.Build;

public class AlarmReceiver extends BroadcastReceiver {{
    private static final String CHANNEL_ID = "{CHANNEL_ID}";

    @Override
    public void onReceive(Context context, Intent intent) {{
        String title = intent.getStringExtra("title");
        String body = intent.getStringExtra("body");
        int requestCode = intent.getIntExtra("request_code", 0);
        int intervalMs = intent.getIntExtra("interval_ms", 86400000);
        if (title == null) title = "Medicine Reminder";
        if (body == null) body = "Time to take your medicine";

        NotificationManager nm =
                (NotificationManager) context.getSystemService(Context.NOTIFICATION_SERVICE);
        if (Build.VERSION.SDK_INT >= 26) {{
            NotificationChannel ch = new NotificationChannel(
                    CHANNEL_ID, "{CHANNEL_NAME}", NotificationManager.IMPORTANCE_HIGH);
            nm.createNotificationChannel(ch);
        }}
        Notification.Builder b = (Build.VERSION.SDK_INT >= 26)
                ? new Notification.Builder(context, CHANNEL_ID)
                : new Notification.Builder(context);
        b.setContentTitle(title)
         .setContentText(body)
         .setSmallIcon(context.getApplicationInfo().icon)
         .setAutoCancel(true);
        nm.notify(requestCode, b.build());

        // daily repeat: re-arm the same PendingIntent one interval later
        Intent next = new Intent(intent);
        int flags = PendingIntent.FLAG_UPDATE_CURRENT;
        if (Build.VERSION.SDK_INT >= 23) flags |= PendingIntent.FLAG_IMMUTABLE;
        PendingIntent pi = PendingIntent.getBroadcast(context, requestCode, next, flags);
        AlarmManager am = (AlarmManager) context.getSystemService(Context.ALARM_SERVICE);
        long at = System.currentTimeMillis() + intervalMs;
        if (Build.VERSION.SDK_INT >= 31 && !am.canScheduleExactAlarms()) {{
            am.setAndAllowWhileIdle(AlarmManager.RTC_WAKEUP, at, pi);
        }} else if (Build.VERSION.SDK_INT >= 23) {{
            am.setExactAndAllowWhileIdle(AlarmManager.RTC_WAKEUP, at, pi);
        }} else {{
            am.setExact(AlarmManager.RTC_WAKEUP, at, pi);
        }}
    }}
}}
"""

JAVA_BOOT_RECEIVER_SRC = r"""
package {JAVA_PACKAGE};

import android.content.BroadcastReceiver;
import android.content.Context;
import android.content.Intent;

public class BootReceiver extends BroadcastReceiver {{
    @Override
    public void onReceive(Context context, Intent intent) {{
        // Alarms do not survive a reboot; launching the app resyncs them.
        Intent launch = context.getPackageManager().getLaunchIntentForPackage(context.getPackageName());
        if (launch != null) {{
            launch.addFlags(Intent.FLAG_ACTIVITY_NEW_TASK);
            context.startActivity(launch);
        }}
    }}
}}
"""

EXTRA_MANIFEST_XML = r"""<manifest xmlns:android="http://schemas.android.com/apk/res/android">
    <uses-permission android:name="android.permission.RECEIVE_BOOT_COMPLETED"/>
    <uses-permission android:name="android.permission.SCHEDULE_EXACT_ALARM"/>
    <uses-permission android:name="android.permission.POST_NOTIFICATIONS"/>
    <uses-permission android:name="android.permission.WAKE_LOCK"/>
    <application>
        <receiver android:name="{JAVA_PACKAGE}.AlarmReceiver" android:exported="false" />
        <receiver android:name="{JAVA_PACKAGE}.BootReceiver" android:exported="false">
            <intent-filter>
                <action android:name="android.intent.action.BOOT_COMPLETED"/>
            </intent-filter>
        </receiver>
    </application>
</manifest>
"""


def write_android_sources(out_dir: Path):
    pkg_path = Path(*JAVA_PACKAGE.split("."))
    src_root = out_dir / "android_src"
    java_dir = src_root / pkg_path
    java_dir.mkdir(parents=True, exist_ok=True)
    fmt = dict(JAVA_PACKAGE=JAVA_PACKAGE, CHANNEL_ID=NOTIFICATION_CHANNEL_ID,
               CHANNEL_NAME=NOTIFICATION_CHANNEL_NAME)
    (java_dir / "AlarmReceiver.java").write_text(JAVA_ALARM_RECEIVER_SRC.format(**fmt), encoding="utf-8")
    (java_dir / "BootReceiver.java").write_text(JAVA_BOOT_RECEIVER_SRC.format(**fmt), encoding="utf-8")
    (src_root / "extra_manifest.xml").write_text(EXTRA_MANIFEST_XML.format(**fmt), encoding="utf-8")
    print(f"[gen] Wrote android sources to: {src_root}")


# -------------------------
# App
# -------------------------
class MedTrackApp(MDApp):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.tracker: Optional[DoseTracker] = None
        self.people: Optional[PeopleRepository] = None
        self._dialog: Optional[MDDialog] = None
        self._time_list: List[str] = []
        self._history_status = "all"
        self._history_this_month = False
        self._fired = FiredSet()

    def build(self):
        self.title = "MedTrack"
        self.theme_cls.theme_style = "Light"
        self.theme_cls.primary_palette = "Teal"
        return Builder.load_string(KV)

    def on_start(self):
        setup_logging(LOG_PATH)
        logger.info(f"app start platform={_kivy_platform} base={BASE_DIR}")
        store = open_store(STORE_DIR, KEY_PATH)
        if _kivy_platform == "android":
            ensure_notification_permission()
            scheduler = AndroidAlarmScheduler(store)
        else:
            scheduler = SimulatedReminderScheduler(store)
            # no AlarmManager on desktop: poll for due doses in-process
            Clock.schedule_interval(lambda *_: self._desktop_reminders(), SERVICE_POLL_SECONDS)

        self.people = PeopleRepository(store)
        self.tracker = DoseTracker(store, scheduler)
        self.tracker.subscribe(self._on_tracker_event)

        self.activate()
        Clock.schedule_interval(lambda *_: self._check_day(), 60)
        Clock.schedule_interval(lambda *_: self.refresh_log(silent=True), 20)
        if self.people.ensure_single_patient() is None:
            Clock.schedule_once(lambda *_: self.show_register_dialog(), 0.5)

    def on_resume(self):
        self._check_day()

    def activate(self):
        """Rollover, then make sure every dose has a reminder armed."""
        try:
            self.tracker.reconcile()
        except MedTrackError:
            logger.exception("reconcile failed")
        self.resync_reminders(silent=True)
        self.refresh_all()

    def _check_day(self):
        if self.tracker and self.tracker.needs_reconcile():
            logger.info("day changed; running rollover")
            self.activate()

    def _desktop_reminders(self):
        if not self.tracker:
            return
        try:
            run_once(self.tracker.medicines, self._fired)
        except MedTrackError:
            logger.exception("desktop reminder pass failed")

    def _on_tracker_event(self, event: str):
        if event == "daily_logs":
            self.refresh_history()
        elif event == "medicines":
            self.refresh_medicines()

    def _fail(self, message: str):
        dialog = MDDialog(title="Error", text=message,
                          buttons=[MDFlatButton(text="OK", on_release=lambda *_: dialog.dismiss())])
        dialog.open()

    def _confirm(self, title: str, text: str, action):
        def go(*_):
            dialog.dismiss()
            try:
                action()
            except MedTrackError as e:
                logger.exception(f"{title} failed")
                self._fail(str(e))

        dialog = MDDialog(
            title=title,
            text=text,
            buttons=[
                MDFlatButton(text="Cancel", on_release=lambda *_: dialog.dismiss()),
                MDRaisedButton(text="OK", on_release=go),
            ],
        )
        dialog.open()

    # -------------------------
    # Navigation
    # -------------------------
    def switch_screen(self, name: str):
        self.root.ids.screen_manager.current = name
        if name == "today":
            self.refresh_today()
        elif name == "medicines":
            self.refresh_medicines()
        elif name == "history":
            self.refresh_history()
        elif name == "settings":
            self.refresh_settings()

    # -------------------------
    # Refresh
    # -------------------------
    def refresh_all(self):
        self.refresh_today()
        self.refresh_medicines()
        self.refresh_history()
        self.refresh_settings()

    def refresh_today(self):
        if not self.tracker:
            return
        try:
            meds = self.tracker.list_medicines()
            tl = self.root.ids.today_list
            tl.clear_widgets()
            done = scheduled = 0
            for med in meds:
                taken, total = adherence.daily_progress(med)
                done += taken
                scheduled += total
                for t in med.scheduled_times:
                    is_taken = med.taken_at(t)
                    item = TwoLineIconListItem(
                        text=f"{med.name}  •  {t}",
                        secondary_text=f"{'Taken' if is_taken else 'Not taken'}  •  "
                                       f"{taken}/{total} today  •  stock {med.quantity}",
                    )
                    item.add_widget(IconLeftWidget(icon="check-circle" if is_taken else "clock-outline"))
                    item.on_release = lambda m=med, t=t, k=is_taken: self.confirm_toggle(m.id, m.name, t, k)
                    tl.add_widget(item)
            self.root.ids.today_header.text = date.today().strftime("%A %d %B %Y")
            pct = adherence.percentage(done, scheduled)
            self.root.ids.today_progress.text = f"{done}/{scheduled} doses taken ({pct}%)"
        except MedTrackError:
            logger.exception("refresh_today failed")

    def refresh_medicines(self):
        if not self.tracker:
            return
        try:
            meds = self.tracker.list_medicines()
            ml = self.root.ids.medicines_list
            ml.clear_widgets()
            for m in meds:
                item = TwoLineIconListItem(text=f"{m.name}  (stock {m.quantity})",
                                           secondary_text=", ".join(m.scheduled_times))
                item.add_widget(IconLeftWidget(icon="pill"))
                item.on_release = lambda m_id=m.id: self.show_medicine_dialog(m_id)
                ml.add_widget(item)
            self.root.ids.med_count.text = f"{len(meds)} medicines"
            self.refresh_today()
        except MedTrackError:
            logger.exception("refresh_medicines failed")

    def refresh_history(self):
        if not self.tracker:
            return
        try:
            filters = {"status": self._history_status}
            if self._history_this_month:
                today = date.today()
                filters.update(month=today.month - 1, year=today.year)
            rows = self.tracker.entries(**filters)
            summary = adherence.summarize(rows)
            hl = self.root.ids.history_list
            hl.clear_widgets()
            for e in rows[:300]:
                item = TwoLineIconListItem(text=f"{e.medicine_name}  •  {e.time}", secondary_text=e.date)
                item.add_widget(IconLeftWidget(icon="check-circle" if e.taken else "close-circle"))
                hl.add_widget(item)
            self.root.ids.hist_summary.text = (
                f"{summary.taken_count} taken / {summary.missed_count} missed  "
                f"({summary.percentage}%)"
            )
        except MedTrackError:
            logger.exception("refresh_history failed")

    def set_history_status(self, status: str):
        self._history_status = status
        self.refresh_history()

    def toggle_history_month(self):
        self._history_this_month = not self._history_this_month
        self.refresh_history()

    def refresh_settings(self):
        if self.people:
            patient = self.people.current_patient()
            if patient is None:
                self.root.ids.profile.text = "No patient registered"
            else:
                text = f"{patient.full_name}  •  {patient.phone_number}"
                if patient.responsible_person_id is not None:
                    rp = self.people.get_responsible_person(patient.responsible_person_id)
                    if rp is not None:
                        text += f"\nCaregiver: {rp.full_name}  •  {rp.phone_number}"
                self.root.ids.profile.text = text
        self.refresh_log(silent=True)

    def refresh_log(self, silent: bool = False):
        if not silent:
            logger.info("log refreshed")
        self.root.ids.debug_log.text = RING.text()
        if self.tracker is not None:
            kb = self.tracker.store.size_bytes() / 1024.0
            self.root.ids.db_status.text = f"Encrypted store: {kb:.1f} KB  •  Base: {BASE_DIR}"

    def clear_log(self):
        clear_log(LOG_PATH)
        self.root.ids.debug_log.text = ""
        logger.info("log cleared")

    # -------------------------
    # Reminders
    # -------------------------
    def resync_reminders(self, silent: bool = False):
        if not self.tracker:
            return
        try:
            count = self.tracker.resync_reminders()
            if not silent:
                mode = "exact" if can_schedule_exact_alarms() else "fallback/simulated"
                logger.info(f"resynced {count} reminders ({mode})")
        except MedTrackError:
            logger.exception("resync_reminders failed")

    # -------------------------
    # Dose toggle
    # -------------------------
    def confirm_toggle(self, medicine_id: int, name: str, time: str, is_taken: bool):
        action = "Undo" if is_taken else "Take"

        def toggle():
            result = self.tracker.toggle_dose(medicine_id, time)
            self.refresh_today()
            if result.taken:
                logger.info(f"{name} taken, {result.medicine.quantity} left")

        self._confirm(f"{action} dose", f"{action} {name} at {time}?", toggle)

    # -------------------------
    # Add / Edit medicine dialog (with time picker)
    # -------------------------
    def show_medicine_dialog(self, med_id: Optional[int] = None):
        med = None
        if med_id is not None:
            try:
                med = self.tracker.medicines.get(med_id)
            except MedTrackError:
                logger.exception("medicine lookup failed")
                return
        self._time_list = list(med.scheduled_times) if med else []

        content = MDBoxLayout(orientation="vertical", spacing="10dp", padding="10dp", size_hint_y=None)
        content.bind(minimum_height=content.setter("height"))
        name = MDTextField(hint_text="Medicine name", text=med.name if med else "", max_text_length=MAX_MEDICINE_NAME)
        quantity = MDTextField(hint_text="Quantity in stock", text=str(med.quantity) if med else "",
                               input_filter="int")
        times_box = MDBoxLayout(orientation="vertical", spacing="6dp", size_hint_y=None)
        times_box.bind(minimum_height=times_box.setter("height"))

        def redraw_times():
            times_box.clear_widgets()
            for t in self._time_list:
                row = MDBoxLayout(orientation="horizontal", spacing="8dp", size_hint_y=None, height="38dp")
                row.add_widget(MDLabel(text=t))
                row.add_widget(MDIconButton(icon="close", on_release=lambda _, t=t: remove_time(t)))
                times_box.add_widget(row)

        def add_time(*_):
            picker = MDTimePicker()

            def on_save(_, time_obj):
                t = f"{time_obj.hour:02d}:{time_obj.minute:02d}"
                if t not in self._time_list:
                    self._time_list = sorted(self._time_list + [t])
                redraw_times()

            picker.bind(on_save=on_save)
            picker.open()

        def remove_time(t: str):
            self._time_list = [x for x in self._time_list if x != t]
            redraw_times()

        for w in (name, quantity, times_box, MDRaisedButton(text="Add time", on_release=add_time)):
            content.add_widget(w)
        redraw_times()

        def save(*_):
            try:
                if med is None:
                    self.tracker.add_medicine(name.text, quantity.text, self._time_list)
                else:
                    self.tracker.edit_medicine(med.id, name=name.text, quantity=quantity.text,
                                               scheduled_times=self._time_list)
            except MedTrackError as e:
                logger.exception("save medicine failed")
                self._fail(str(e))
                return
            self._dialog.dismiss()
            self.refresh_medicines()

        def delete(*_):
            self._dialog.dismiss()
            self._confirm("Delete medicine", f"Delete {med.name}?", lambda: self.tracker.remove_medicine(med.id))

        buttons = [MDFlatButton(text="Cancel", on_release=lambda *_: self._dialog.dismiss()),
                   MDRaisedButton(text="Save", on_release=save)]
        if med is not None:
            buttons.insert(0, MDFlatButton(text="Delete", on_release=delete))
        self._dialog = MDDialog(title="Edit medicine" if med else "Add medicine", type="custom",
                                content_cls=content, buttons=buttons)
        self._dialog.open()

    # -------------------------
    # Registration / history maintenance
    # -------------------------
    def show_register_dialog(self):
        content = MDBoxLayout(orientation="vertical", spacing="8dp", padding="10dp", size_hint_y=None)
        content.bind(minimum_height=content.setter("height"))
        fields = {
            "first_name": MDTextField(hint_text="First name"),
            "last_name": MDTextField(hint_text="Last name"),
            "phone_number": MDTextField(hint_text="Phone number", input_filter="int"),
            "rp_first_name": MDTextField(hint_text="Caregiver first name (optional)"),
            "rp_last_name": MDTextField(hint_text="Caregiver last name"),
            "rp_phone_number": MDTextField(hint_text="Caregiver phone number", input_filter="int"),
        }
        for w in fields.values():
            content.add_widget(w)

        def save(*_):
            values = {k: w.text.strip() for k, w in fields.items()}
            responsible = None
            if values["rp_first_name"]:
                responsible = {"first_name": values["rp_first_name"],
                               "last_name": values["rp_last_name"],
                               "phone_number": values["rp_phone_number"]}
            try:
                self.people.register(values["first_name"], values["last_name"], values["phone_number"],
                                     registered_by="responsible" if responsible else "patient",
                                     responsible=responsible)
            except MedTrackError as e:
                self._fail(str(e))
                return
            dialog.dismiss()
            self.refresh_settings()

        dialog = MDDialog(title="Who is this for?", type="custom", content_cls=content,
                          auto_dismiss=False, buttons=[MDRaisedButton(text="Save", on_release=save)])
        dialog.open()

    def confirm_delete_month(self):
        today = date.today()

        def delete():
            removed = self.tracker.delete_logs_for_month(today.month - 1, today.year)
            logger.info(f"deleted {removed} days of logs")

        self._confirm("Delete logs", f"Delete every log of {today.strftime('%B %Y')}?", delete)

    def confirm_clear_logs(self):
        self._confirm("Clear logs", "Delete the whole dose history?", self.tracker.clear_logs)

    def confirm_reset_profile(self):
        def reset():
            self.people.delete_all()
            self.refresh_settings()
            self.show_register_dialog()

        self._confirm("Reset profile", "Delete the patient and caregiver details?", reset)


# -------------------------
# Entrypoint
# -------------------------
def main():
    if "--gen-android" in sys.argv:
        write_android_sources(Path.cwd())
        return

    MedTrackApp().run()


if __name__ == "__main__":
    main()
