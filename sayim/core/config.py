import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _float_or_none(value: str) -> Optional[float]:
    value = (value or "").strip()
    if not value:
        return None
    return float(value)


class Settings:
    # Remote catalog (Depo / barcode lookup / SendToVega)
    catalog_base_url: str = os.getenv(
        "CATALOG_BASE_URL",
        "http://192.168.10.2:82/SayimAktarmaApi"
    )
    catalog_timeout: Optional[float] = _float_or_none(os.getenv("CATALOG_TIMEOUT", "60"))

    # Local key-value store for the pending count list
    store_url: str = os.getenv("STORE_URL", "sqlite:///sayim_store.db")
    store_key: str = os.getenv("STORE_KEY", "groupedCountItems")
    persistence_fail_loud: bool = os.getenv("PERSISTENCE_FAIL_LOUD", "False").lower() == "true"
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    count_type: str = os.getenv("COUNT_TYPE", "GENEL")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
