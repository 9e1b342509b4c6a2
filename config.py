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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./store_credit.db")
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Store credit behaviour
    # True: credits go to a new store credit instead of back to the original one
    STORE_CREDIT_CREDIT_TO_NEW_ALLOCATION = bool(data.get("STORE_CREDIT_CREDIT_TO_NEW_ALLOCATION", False))
    # Category names whose credits get the "Non-expiring" type
    STORE_CREDIT_NON_EXPIRING_CATEGORIES = data.get("STORE_CREDIT_NON_EXPIRING_CATEGORIES", [])

    # Store credit reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
