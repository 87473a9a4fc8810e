#!/usr/bin/env python
"""Container entrypoint for the ShiftCensus API.

RUN_DB_MIGRATIONS=1 upgrades the scheduling schema in-process before uvicorn
starts; the app's own startup hook is then a no-op for this process tree.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))


def _maybe_run_migrations() -> None:
    if os.getenv("RUN_DB_MIGRATIONS") != "1":
        return
    from shiftcensus.migration_runner import run_migrations_once

    print("[runserver] RUN_DB_MIGRATIONS=1 detected. Applying migrations...", flush=True)
    run_migrations_once()


def _server_command() -> list[str]:
    configured = os.getenv("RUNSERVER_CMD")
    if configured:
        return shlex.split(configured)
    return [
        "uvicorn",
        "shiftcensus.main:app",
        "--host",
        os.getenv("HOST", "0.0.0.0"),
        "--port",
        os.getenv("PORT", "8000"),
        "--log-level",
        os.getenv("LOG_LEVEL", "info").lower(),
    ]


def main() -> int:
    try:
        _maybe_run_migrations()
        command = _server_command()
        env = dict(os.environ)
        if os.getenv("RUN_DB_MIGRATIONS") == "1":
            env["RUN_MIGRATIONS_ON_STARTUP"] = "false"
        print(f"[runserver] Starting server: {' '.join(command)}", flush=True)
        subprocess.run(command, check=True, cwd=PROJECT_ROOT, env=env)
    except subprocess.CalledProcessError as exc:
        print(f"[runserver] command failed: {exc}", file=sys.stderr)
        return exc.returncode or 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
