"""Plugin settings (dotenv + environment overrides)."""
from __future__ import annotations
import os
from pathlib import Path
from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).parent
load_dotenv(Path.cwd() / ".env", override=False)


class settings:                            # pylint: disable=too-few-public-methods
    LOG_LEVEL    = os.getenv("SDM630_LOG_LEVEL", "INFO").upper()
    LOCALE       = os.getenv("SDM630_LOCALE", "en")
    RESOURCE_DIR = Path(os.getenv("SDM630_RESOURCE_DIR", PACKAGE_DIR / "resources"))
