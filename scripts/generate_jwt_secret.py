"""
Print a strong signing secret for JWT_SECRET.

Usage: python scripts/generate_jwt_secret.py >> .env
"""

from __future__ import annotations

import secrets
import sys


def generate_secret(nbytes: int = 64) -> str:
    return secrets.token_urlsafe(nbytes)


def main() -> int:
    sys.stdout.write(f"JWT_SECRET={generate_secret()}\n")
    sys.stderr.write("Keep this secret out of version control.\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
