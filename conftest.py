import os
import sys
from pathlib import Path

# Ensure repo root on sys.path for imports from anywhere in tests tree.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("ASSET_SHEET_BACKEND", "memory")
os.environ.setdefault("ASSET_NOTIFY_BACKEND", "memory")

import pytest  # noqa: E402

from asset_engines.storage.sheet_store import InMemoryWorkbookStore, set_workbook_store  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_workbooks():
    store = InMemoryWorkbookStore()
    set_workbook_store(store)
    yield store
