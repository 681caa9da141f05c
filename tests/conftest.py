"""
Point the store at a throwaway SQLite file before fsb_admin is imported.
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="fsb-admin-tests-")

os.environ.setdefault(
    "FSB_ADMIN_DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'admin.db')}",
)
os.environ.setdefault("FSB_ADMIN_STATS_INTERVAL_SECONDS", "0.05")
os.environ.setdefault("FSB_ADMIN_LOG_JSON", "false")
os.environ.setdefault("FSB_ADMIN_LOG_LEVEL", "WARNING")
