# service/reminder_service.py
# python-for-android background service: posts a notification for every dose
# that falls due and has not been marked taken today. Registered in
# buildozer.spec as  services = Reminders:service/reminder_service.py

import logging
import time

from applog import setup_logging
from config import KEY_PATH, LOG_PATH, SERVICE_POLL_SECONDS, STORE_DIR
from errors import MedTrackError
from medicines import MedicineRepository
from reminders import FiredSet, run_once
from store import open_store

logger = logging.getLogger("medtrack.service")


def main_loop():
    setup_logging(LOG_PATH)
    repo = MedicineRepository(open_store(STORE_DIR, KEY_PATH))
    fired = FiredSet()
    logger.info("reminder service started")
    while True:
        try:
            sent = run_once(repo, fired)
            if sent:
                logger.info("reminder service sent %d notifications", sent)
        except MedTrackError:
            logger.exception("reminder service pass failed")
        time.sleep(SERVICE_POLL_SECONDS)


if __name__ == "__main__":
    main_loop()
