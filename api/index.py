"""Serverless entrypoint for the ShiftCensus API."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
	sys.path.append(str(ROOT_DIR))

from shiftcensus.migration_runner import run_migrations_once  # noqa: E402

run_migrations_once()

from shiftcensus.main import app as fastapi_app  # noqa: E402

# ASGI app picked up by the Python runtime
app = fastapi_app
