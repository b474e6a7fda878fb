"""Global pytest configuration."""

import os
import tempfile

# Settings are read at import time; pin them before any logistics import
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'logistics_pytest.db')}",
)
os.environ.setdefault("JWT_SECRET", "pytest-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("MIGRATE_ON_STARTUP", "false")
os.environ.setdefault("APP_ENV", "test")
