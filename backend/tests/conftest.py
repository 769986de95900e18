"""Root conftest — shared test configuration."""

import os

# Tests never pick up a developer's .env profile or databases
os.environ.setdefault("HARMONIA_ENV", "test")
os.environ.setdefault("HARMONIA_DATABASES", "{}")
