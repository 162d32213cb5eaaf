"""Send the daily diary reminder once, outside the API process (e.g. from cron)."""

import logging
from app.core.scheduler import send_reminders_job

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

if __name__ == "__main__":
    delivered = send_reminders_job()
    print(f"Delivered {delivered} reminder(s)")
