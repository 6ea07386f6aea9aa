"""Root conftest: shared test configuration."""

import os

# Keep tests away from a developer's real asset tree and .env log settings
os.environ.setdefault("STORAGE_PATH", "/nonexistent-sandwich-assets")
os.environ.setdefault("LOG_FORMAT", "text")
