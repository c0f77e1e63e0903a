#!/usr/bin/env python3
"""
Generate secrets for local development.

Writes a session signing secret, a backend API token and the backend's user
token secret into config/.env, creating it from config/.env.example when
missing. Existing values are replaced; every other line is kept.

Usage:
    python scripts/generate_secrets.py
"""

import os
import secrets
import shutil
import sys
from pathlib import Path


def generate_secrets() -> dict[str, str]:
    """
    Generate fresh secrets.

    Returns:
        Mapping of environment variable to value
    """
    return {
        "JWT_SECRET": secrets.token_urlsafe(48),
        "BACKEND_API_TOKEN": secrets.token_urlsafe(32),
        "BACKEND_JWT_SECRET": secrets.token_urlsafe(48),
    }


def write_env(env_file: Path, values: dict[str, str]) -> None:
    """Replace or append each key in an env file"""
    lines = env_file.read_text().splitlines() if env_file.exists() else []
    remaining = dict(values)

    updated = []
    for line in lines:
        key = line.split("=", 1)[0].strip()
        if key in remaining:
            updated.append(f"{key}={remaining.pop(key)}")
        else:
            updated.append(line)
    updated.extend(f"{key}={value}" for key, value in remaining.items())

    env_file.write_text("\n".join(updated) + "\n")
    os.chmod(env_file, 0o600)  # Restrict permissions


def main():
    # Determine project root
    script_dir = Path(__file__).parent
    project_root = script_dir.parent
    env_file = project_root / "config" / ".env"
    env_example = project_root / "config" / ".env.example"

    print("=" * 60)
    print("Secret Generator")
    print("=" * 60)

    if env_file.exists():
        response = input("\nconfig/.env already exists. Replace its secrets? [y/N]: ")
        if response.lower() != "y":
            print("Aborted.")
            sys.exit(0)
    elif env_example.exists():
        shutil.copy(env_example, env_file)
        print("\nCreated config/.env from example")

    values = generate_secrets()
    write_env(env_file, values)

    print("\nUpdated config/.env:")
    for key in values:
        print(f"   {key}=...")

    print("\n" + "=" * 60)
    print("Secrets generated successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
