import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./subscriptions.db")
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Background jobs (billing triggers, tracking events)
    JOB_QUEUE_MAX_SIZE = int(data.get("JOB_QUEUE_MAX_SIZE", 1000))  # 0 = unbounded
    BILLING_WEBHOOK_URL = data.get("BILLING_WEBHOOK_URL", None)  # None = log only
    ANALYTICS_WEBHOOK_URL = data.get("ANALYTICS_WEBHOOK_URL", None)  # None = log only
    WEBHOOK_TIMEOUT_SECONDS = float(data.get("WEBHOOK_TIMEOUT_SECONDS", 10.0))
    TRACKING_ENABLED = bool(data.get("TRACKING_ENABLED", True))
