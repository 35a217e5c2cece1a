#!/usr/bin/env python3
"""
PartSync management CLI.

Usage:
    python manage.py start       Start the API server in the background
    python manage.py stop        Graceful shutdown
    python manage.py restart     Stop + start
    python manage.py dev         Run the API with auto-reload in the foreground
    python manage.py status      Check if server is running
    python manage.py migrate     Apply pending database migrations
    python manage.py mrp         Run MRP once and print the summary
"""

import argparse
import asyncio
import json
import os
import signal
import socket
import subprocess
import sys
import time
from datetime import date
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".partsync.pid"
APP_PATH = "partsync.api.main:app"


def _read_pid() -> int | None:
    """Read PID from .partsync.pid, return None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    # Stale PID file
    PID_FILE.unlink(missing_ok=True)
    return None


def _is_pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _is_port_free(port: int) -> bool:
    """Check if a port is available for binding."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def _stop_pid(pid: int, timeout: float = 5.0) -> bool:
    """SIGTERM, then SIGKILL if the process outlives ``timeout``."""
    try:
        os.kill(pid, signal.SIGTERM)
    except OSError:
        return not _is_pid_alive(pid)

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _is_pid_alive(pid):
            return True
        time.sleep(0.1)

    try:
        os.kill(pid, signal.SIGKILL)
    except OSError:
        pass
    time.sleep(0.2)
    return not _is_pid_alive(pid)


def cmd_start(args: argparse.Namespace) -> None:
    """Start uvicorn in the background and record its PID."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        print(f"Error: Port {args.port} is in use.")
        sys.exit(1)

    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        APP_PATH,
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.workers and args.workers > 1:
        uvicorn_cmd += ["--workers", str(args.workers)]

    print(f"Starting server on {args.host}:{args.port}...")
    proc = subprocess.Popen(uvicorn_cmd, cwd=str(ROOT_DIR))

    PID_FILE.write_text(str(proc.pid))
    print(f"Server started (PID {proc.pid}).")
    print(f"  API:      http://{args.host}:{args.port}/api")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return

    print(f"Stopping server (PID {pid})...")
    stopped = _stop_pid(pid)
    PID_FILE.unlink(missing_ok=True)
    print("Server stopped." if stopped else "Warning: Server may still be running.")


def cmd_restart(args: argparse.Namespace) -> None:
    cmd_stop(args)
    cmd_start(args)


def cmd_dev(args: argparse.Namespace) -> None:
    """Run uvicorn with --reload in the foreground."""
    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        APP_PATH,
        "--host", args.host,
        "--port", str(args.port),
        "--reload",
    ]
    try:
        subprocess.run(uvicorn_cmd, cwd=str(ROOT_DIR))
    except KeyboardInterrupt:
        pass


def cmd_status(args: argparse.Namespace) -> None:
    """Report whether the server is running."""
    pid = _read_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
    elif not _is_port_free(args.port):
        print(f"No PID file, but port {args.port} is in use.")
    else:
        print("Server is not running.")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations, or report status or integrity checks."""
    from partsync.config import configure_logging
    from partsync.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        run_migrations,
        verify_schema_integrity,
    )

    configure_logging()

    if args.status:
        status = asyncio.run(get_migration_status())
        print(json.dumps(status, indent=2, default=str))
        return

    if args.verify:
        checks = asyncio.run(verify_schema_integrity())
        for check in checks:
            print(f"  [{check['status']}] {check['check']}")
        if any(c["status"] != "PASS" for c in checks):
            sys.exit(1)
        return

    results = asyncio.run(run_migrations())
    for result in results:
        mark = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  {result.version} {result.name} ({result.execution_time_ms}ms) {mark}")
    if not results:
        print("Database is up to date.")
    if any(not r.success for r in results):
        sys.exit(1)


async def _run_mrp(sales_order_id: int | None, as_of: date | None) -> dict:
    from partsync.application.services import get_mrp_planning_service
    from partsync.infrastructure.notifications import WebhookNotifier, get_notifier
    from partsync.infrastructure.storage.sqlite import close_connection_pool
    from partsync.infrastructure.storage.sqlite.migrations import run_migrations

    await run_migrations()
    try:
        planning = await get_mrp_planning_service()
        outcome = await planning.run(as_of=as_of, sales_order_id=sales_order_id)
        notifier = get_notifier()
        if isinstance(notifier, WebhookNotifier):
            await notifier.drain()
        return {
            "as_of": outcome.as_of.isoformat(),
            "sales_order_id": outcome.sales_order_id,
            "results": len(outcome.results),
            "critical": outcome.summary.critical_count,
            "high": outcome.summary.high_count,
            "medium": outcome.summary.medium_count,
            "low": outcome.summary.low_count,
            "parts_needing_order": outcome.summary.parts_needing_order,
            "total_recommended_qty": outcome.summary.total_recommended_qty,
        }
    finally:
        await close_connection_pool()


def cmd_mrp(args: argparse.Namespace) -> None:
    """Run MRP outside the API (cron, manual replanning)."""
    from partsync.config import configure_logging

    configure_logging()
    as_of = date.fromisoformat(args.as_of) if args.as_of else None
    summary = asyncio.run(_run_mrp(args.sales_order, as_of))
    print(json.dumps(summary, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="PartSync management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command")

    def add_server_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
        p.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")

    p_start = sub.add_parser("start", help="Start the API server")
    add_server_args(p_start)
    p_start.add_argument("--workers", type=int, default=1, help="Uvicorn workers")

    p_stop = sub.add_parser("stop", help="Stop the API server")
    add_server_args(p_stop)

    p_restart = sub.add_parser("restart", help="Restart the API server")
    add_server_args(p_restart)
    p_restart.add_argument("--workers", type=int, default=1, help="Uvicorn workers")

    p_dev = sub.add_parser("dev", help="Run with auto-reload")
    add_server_args(p_dev)

    p_status = sub.add_parser("status", help="Check server status")
    add_server_args(p_status)

    p_migrate = sub.add_parser("migrate", help="Apply database migrations")
    p_migrate.add_argument("--status", action="store_true", help="Show migration status only")
    p_migrate.add_argument("--verify", action="store_true", help="Run schema integrity checks")

    p_mrp = sub.add_parser("mrp", help="Run MRP and print the summary")
    p_mrp.add_argument("--sales-order", type=int, default=None, help="Scope to one sales order")
    p_mrp.add_argument("--as-of", default=None, help="Planning date, YYYY-MM-DD")

    args = parser.parse_args()

    commands = {
        "start": cmd_start,
        "stop": cmd_stop,
        "restart": cmd_restart,
        "dev": cmd_dev,
        "status": cmd_status,
        "migrate": cmd_migrate,
        "mrp": cmd_mrp,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)
    handler(args)


if __name__ == "__main__":
    main()
