#!/usr/bin/env python3
"""Utility to verify dependencies and launch backend + frontend together.

This script handles:
- Installing the project and its dependencies from pyproject.toml
- Starting the FastAPI backend with the news and lesson endpoints
- Starting the Streamlit reader
- Graceful shutdown of all services
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
import time
import urllib.error
import urllib.request
from pathlib import Path
from typing import Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
PYPROJECT_FILE = ROOT_DIR / "pyproject.toml"
STREAMLIT_APP = ROOT_DIR / "src" / "news_lessons" / "ui" / "streamlit_app.py"
UVICORN_APP = "src.news_lessons.api.server:app"


def ensure_dependencies(skip_install: bool, upgrade: bool = False) -> None:
    """Install the project in editable mode so its dependencies are present.

    Args:
        skip_install: If True, skip dependency installation entirely.
        upgrade: If True, upgrade packages to latest versions.
    """

    if skip_install:
        print("[deps] Skipping dependency check (requested).")
        return

    if not PYPROJECT_FILE.exists():
        raise FileNotFoundError(f"Could not find project file at {PYPROJECT_FILE}.")

    print(f"[deps] Ensuring dependencies from {PYPROJECT_FILE} are installed...")
    cmd = [sys.executable, "-m", "pip", "install", "-e", str(ROOT_DIR)]
    if upgrade:
        cmd.append("--upgrade")
    subprocess.check_call(cmd, cwd=ROOT_DIR)  # noqa: S603,S607 - controlled input
    print("[deps] Dependencies are ready.")


def check_env_vars() -> list[str]:
    """Check for required environment variables and return list of missing ones."""
    required = ["NEWSDATA_API_KEY", "GOOGLE_API_KEY"]
    optional = ["LESSON_MODEL_NAME"]

    missing = [var for var in required if not os.environ.get(var)]

    if missing:
        print(f"[env] WARNING: Missing required environment variables: {', '.join(missing)}")
        print("[env] Please set these in your .env file or environment.")

    for var in optional:
        if not os.environ.get(var):
            print(f"[env] Note: Optional variable {var} not set.")

    return missing


def start_process(label: str, command: Sequence[str], env: dict[str, str]) -> subprocess.Popen:
    """Launch a child process and return the handle."""

    print(f"[{label}] {' '.join(command)}")
    return subprocess.Popen(  # noqa: S603 - command constructed above
        command,
        cwd=ROOT_DIR,
        env=env,
    )


def wait_for_backend(base_url: str, timeout: float) -> None:
    """Poll the backend health endpoint until it responds or timeout occurs."""

    health_url = f"{base_url.rstrip('/')}" + "/health"
    deadline = time.time() + timeout
    print(f"[backend] Waiting for health check at {health_url} ...")
    while time.time() < deadline:
        try:
            with urllib.request.urlopen(health_url, timeout=3):  # noqa: S310
                print("[backend] Health check succeeded.")
                return
        except urllib.error.URLError:
            time.sleep(1.0)
    print(
        "[backend] Health check timed out. The reader may fail to connect if the "
        "backend is still starting."
    )


def shutdown_process(proc: subprocess.Popen | None, label: str) -> None:
    if proc is None or proc.poll() is not None:
        return

    print(f"[{label}] Stopping...")
    proc.terminate()
    try:
        proc.wait(timeout=10)
    except subprocess.TimeoutExpired:
        print(f"[{label}] Terminate timed out. Killing...")
        proc.kill()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Verify Python dependencies are installed, then start the FastAPI "
            "backend and the Streamlit reader together."
        )
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Skip running 'pip install -e .' before launching.",
    )
    parser.add_argument(
        "--upgrade-deps",
        action="store_true",
        help="Upgrade all dependencies to latest versions.",
    )
    parser.add_argument(
        "--backend-host",
        default="127.0.0.1",
        help="Host/interface for the FastAPI server (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--backend-port",
        type=int,
        default=8000,
        help="Port for the FastAPI server (default: 8000).",
    )
    parser.add_argument(
        "--frontend-port",
        type=int,
        default=8501,
        help="Port for the Streamlit app (default: 8501).",
    )
    parser.add_argument(
        "--backend-startup-timeout",
        type=float,
        default=30.0,
        help="Seconds to wait for the backend health endpoint before continuing.",
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable uvicorn auto-reload (enabled by default).",
    )
    parser.add_argument(
        "--backend-only",
        action="store_true",
        help="Start only the API, without the Streamlit reader.",
    )
    parser.add_argument(
        "--skip-env-check",
        action="store_true",
        help="Skip checking for required environment variables.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    # Load .env file if python-dotenv is available
    try:
        from dotenv import load_dotenv
        env_file = ROOT_DIR / ".env"
        if env_file.exists():
            load_dotenv(env_file)
            print(f"[env] Loaded environment from {env_file}")
    except ImportError:
        pass  # dotenv not installed, rely on system env vars

    if not args.skip_env_check:
        missing = check_env_vars()
        if missing:
            print("[env] Continuing anyway; the affected endpoint will answer 500.")

    try:
        ensure_dependencies(skip_install=args.skip_install, upgrade=args.upgrade_deps)
    except (subprocess.CalledProcessError, FileNotFoundError) as exc:
        print(f"[deps] Dependency installation failed: {exc}")
        return 1

    backend_base_url = f"http://{args.backend_host}:{args.backend_port}"

    env = os.environ.copy()
    env.setdefault("NEWS_LESSONS_API_BASE_URL", backend_base_url)

    backend_cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        UVICORN_APP,
        "--host",
        args.backend_host,
        "--port",
        str(args.backend_port),
    ]
    if not args.no_reload:
        backend_cmd.append("--reload")

    frontend_cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(STREAMLIT_APP),
        "--server.port",
        str(args.frontend_port),
    ]

    backend_proc = frontend_proc = None
    try:
        backend_proc = start_process("backend", backend_cmd, env)
        wait_for_backend(backend_base_url, args.backend_startup_timeout)
        if not args.backend_only:
            frontend_proc = start_process("frontend", frontend_cmd, env)

        print("[runner] Services are running. Press Ctrl+C to stop.")
        print(f"[runner] Backend API: {backend_base_url}")
        if frontend_proc is not None:
            print(f"[runner] Frontend UI: http://localhost:{args.frontend_port}")
        print(f"[runner] API Docs: {backend_base_url}/docs")

        while True:
            backend_status = backend_proc.poll() if backend_proc else 0
            frontend_status = frontend_proc.poll() if frontend_proc else None

            if backend_status is not None:
                print(f"[backend] exited with status {backend_status}.")
                break
            if frontend_status is not None:
                print(f"[frontend] exited with status {frontend_status}.")
                break
            time.sleep(0.5)
    except KeyboardInterrupt:
        print("\n[runner] Caught KeyboardInterrupt. Shutting down...")
    finally:
        shutdown_process(frontend_proc, "frontend")
        shutdown_process(backend_proc, "backend")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
