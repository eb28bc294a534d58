"""Global pytest configuration."""

import os

# Keep tests off real databases and providers before any imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["FIREWORKS_API_KEY"] = ""
os.environ["ENABLE_ROUTE_SEGMENTS"] = "false"
