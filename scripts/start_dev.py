#!/usr/bin/env python3
"""
Development startup script.

Starts both the mock backend and the storefront in development mode.
"""

import os
import sys
import subprocess
import time
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import uvicorn
        import httpx
        import jwt
        import websockets
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .")
        return False


def check_secrets():
    """Check that the session secret was changed from its default."""
    env_file = PROJECT_ROOT / "config" / ".env"
    if env_file.exists() and "JWT_SECRET=change-me" not in env_file.read_text():
        print("✓ Secrets configured")
        return True
    print("✗ Secrets not generated")
    print("\nRun: python scripts/generate_secrets.py")
    return False


def check_env():
    """Check if .env file exists."""
    env_file = PROJECT_ROOT / "config" / ".env"
    env_example = PROJECT_ROOT / "config" / ".env.example"

    if env_file.exists():
        print("✓ Configuration file found")
        return True
    elif env_example.exists():
        print("! Configuration file not found, copying from example...")
        import shutil
        shutil.copy(env_example, env_file)
        print("✓ Created config/.env from example")
        print("  Please edit config/.env with your settings")
        return True
    else:
        print("✗ No configuration file found")
        return False


def start_services():
    """Start both services in development mode."""
    processes = []

    try:
        # Start Mock Backend
        print("\n🏪 Starting Mock Backend on http://localhost:8001 ...")
        backend_process = subprocess.Popen(
            [
                sys.executable, "-m", "uvicorn",
                "mock_backend.main:app",
                "--reload",
                "--host", "0.0.0.0",
                "--port", "8001",
            ],
            cwd=PROJECT_ROOT,
            env=os.environ.copy(),
        )
        processes.append(backend_process)

        # Wait a bit for the backend to start
        time.sleep(2)

        # Start Storefront
        print("🛒 Starting Storefront on http://localhost:8000 ...")
        storefront_process = subprocess.Popen(
            [
                sys.executable, "-m", "uvicorn",
                "storefront.main:app",
                "--reload",
                "--host", "0.0.0.0",
                "--port", "8000",
            ],
            cwd=PROJECT_ROOT,
            env=os.environ.copy(),
        )
        processes.append(storefront_process)

        print("\n" + "=" * 60)
        print("Services started successfully!")
        print("=" * 60)
        print("\n📍 Storefront:      http://localhost:8000")
        print("📍 Storefront API:  http://localhost:8000/docs")
        print("📍 Backend API:     http://localhost:8001/docs")
        print("\nPress Ctrl+C to stop all services")
        print("=" * 60)

        # Wait for processes
        for p in processes:
            p.wait()

    except KeyboardInterrupt:
        print("\n\nShutting down services...")
        for p in processes:
            p.terminate()
        for p in processes:
            p.wait()
        print("All services stopped.")


def main():
    print("=" * 60)
    print("Storefront - Development Server")
    print("=" * 60)

    # Pre-flight checks
    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    if not check_env():
        sys.exit(1)

    if not check_secrets():
        response = input("\nGenerate secrets now? [Y/n]: ")
        if response.lower() != "n":
            subprocess.run([sys.executable, str(PROJECT_ROOT / "scripts" / "generate_secrets.py")])
        else:
            print("Secrets are required. Exiting.")
            sys.exit(1)

    print("\n✓ All checks passed!")

    # Start services
    start_services()


if __name__ == "__main__":
    main()
