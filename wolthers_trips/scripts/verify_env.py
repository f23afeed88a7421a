"""
Verify Environment Script
Reports which deployment variables are set in an env file (default
.env.local) and prints the Vercel CLI commands to push them.
Exits with status 1 when a required variable is missing.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import dotenv_values

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

REQUIRED_VARS = [
    "NEXT_PUBLIC_SUPABASE_URL",
    "NEXT_PUBLIC_SUPABASE_ANON_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASSWORD",
    "SMTP_FROM",
    "NEXTAUTH_SECRET",
]

OPTIONAL_VARS = [
    "NEXTAUTH_URL",
    "NEXT_PUBLIC_APP_URL",
    "NODE_ENV",
    "CLAUDE_API_KEY",
    "OPENAI_API_KEY",
    "GOOGLE_MAPS_API_KEY",
    "HOTELS_COM_API_KEY",
    "MICROSOFT_CLIENT_ID",
    "MICROSOFT_CLIENT_SECRET",
]

PREVIEW_LENGTH = 20


def preview(value: str) -> str:
    return value[:PREVIEW_LENGTH] + "..." if len(value) > PREVIEW_LENGTH else value


def load_env(path: Path) -> Dict[str, Optional[str]]:
    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {path}")
    return dotenv_values(path)


def missing_required(env: Dict[str, Optional[str]]) -> List[str]:
    return [name for name in REQUIRED_VARS if not env.get(name)]


def vercel_commands(env: Dict[str, Optional[str]], target: str = "production") -> List[str]:
    return [f"vercel env add {name} {target}" for name in REQUIRED_VARS + OPTIONAL_VARS if env.get(name)]


def report(env: Dict[str, Optional[str]]) -> List[str]:
    logger.info("Required variables:")
    for name in REQUIRED_VARS:
        value = env.get(name)
        logger.info(f"  {name}: {preview(value)}" if value else f"  {name}: MISSING")

    logger.info("Optional variables:")
    for name in OPTIONAL_VARS:
        value = env.get(name)
        logger.info(f"  {name}: {preview(value)}" if value else f"  {name}: not set")

    missing = missing_required(env)
    if missing:
        logger.info("Missing required variables:")
        for name in missing:
            logger.info(f"  - {name}")
    else:
        logger.info("All required environment variables are configured")

    logger.info("Vercel CLI commands to set variables:")
    for command in vercel_commands(env):
        logger.info(f"  {command}")
    return missing


def main(argv=None):
    parser = argparse.ArgumentParser(description="Check deployment environment variables")
    parser.add_argument("env_file", nargs="?", default=".env.local", help="Env file to check (default: .env.local)")
    args = parser.parse_args(argv)

    try:
        env = load_env(Path(args.env_file))
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    if report(env):
        sys.exit(1)


if __name__ == "__main__":
    main()
