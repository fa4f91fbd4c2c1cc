# config.py
# Paths, Android identity and reminder constants.
#
# Data directory resolution (first writable wins):
#   MEDTRACK_DATA_DIR  -> used as-is
#   ANDROID_PRIVATE    -> <ANDROID_PRIVATE>/medtrack_data
#   Android files dir  -> <getFilesDir()>/medtrack_data
#   fallback           -> <this dir>/medtrack_data

import os
import uuid
from pathlib import Path
from typing import Optional

try:
    from jnius import autoclass
except Exception:
    autoclass = None

# -------------------------
# Package identity (for Java)
# -------------------------
PACKAGE_DOMAIN = "org.example"
PACKAGE_NAME = "medtrack"
JAVA_PACKAGE = f"{PACKAGE_DOMAIN}.{PACKAGE_NAME}"
JAVA_ALARM_RECEIVER = f"{JAVA_PACKAGE}.AlarmReceiver"
JAVA_BOOT_RECEIVER = f"{JAVA_PACKAGE}.BootReceiver"

NOTIFICATION_CHANNEL_ID = "medicine_reminders"
NOTIFICATION_CHANNEL_NAME = "Medicine Reminders"

# -------------------------
# Reminders
# -------------------------
REMINDER_PREFIX = "medicine-"
REMINDER_INTERVAL_MS = 24 * 60 * 60 * 1000
SERVICE_POLL_SECONDS = 20
SERVICE_WINDOW_SECONDS = 45

# -------------------------
# Validation limits
# -------------------------
MAX_MEDICINE_NAME = 50
LOG_RING_LINES = 800


def _is_writable_dir(p: Path) -> bool:
    try:
        p.mkdir(parents=True, exist_ok=True)
        t = p / f".writetest.{uuid.uuid4().hex}"
        t.write_text("ok", encoding="utf-8")
        t.unlink(missing_ok=True)
        return True
    except OSError:
        return False


def _android_files_dir() -> Optional[Path]:
    if autoclass is None:
        return None
    for holder, attr in (("org.kivy.android.PythonActivity", "mActivity"),
                         ("org.kivy.android.PythonService", "mService")):
        try:
            ctx = getattr(autoclass(holder), attr)
            if ctx is not None:
                return Path(str(ctx.getFilesDir().getAbsolutePath()))
        except Exception:
            continue
    return None


def _app_base_dir() -> Path:
    explicit = os.environ.get("MEDTRACK_DATA_DIR")
    if explicit and _is_writable_dir(Path(explicit)):
        return Path(explicit)

    p = os.environ.get("ANDROID_PRIVATE")
    if p:
        d = Path(p) / "medtrack_data"
        if _is_writable_dir(d):
            return d

    af = _android_files_dir()
    if af:
        d = af / "medtrack_data"
        if _is_writable_dir(d):
            return d

    d = Path(__file__).resolve().parent / "medtrack_data"
    d.mkdir(parents=True, exist_ok=True)
    return d


BASE_DIR = _app_base_dir()
STORE_DIR = BASE_DIR / "store"
KEY_PATH = BASE_DIR / ".enc_key"
LOG_PATH = BASE_DIR / "app.log"
