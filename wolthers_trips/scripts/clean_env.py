"""
Clean Environment File Script
Rewrites an env file with every value stripped of surrounding whitespace,
quotes and embedded newlines (real or escaped), which break keys pasted
into hosting dashboards. Values are never logged.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

HEADER = "# Clean environment variables - single line values, no quotes\n"


def clean_value(value: Optional[str]) -> str:
    if value is None:
        return ""
    for token in ("\\r", "\\n", "\r", "\n"):
        value = value.replace(token, "")
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1].strip()
    return value


def clean_env(values: Dict[str, Optional[str]]) -> Dict[str, str]:
    return {key: clean_value(value) for key, value in values.items()}


def render(values: Dict[str, str]) -> str:
    return HEADER + "".join(f"{key}={value}\n" for key, value in values.items())


def main(argv=None):
    parser = argparse.ArgumentParser(description="Strip newlines and quotes from env file values")
    parser.add_argument("env_file", nargs="?", default=".env.local", help="Env file to read (default: .env.local)")
    parser.add_argument("-o", "--output", default="vercel-env-clean.env", help="File to write")
    args = parser.parse_args(argv)

    source = Path(args.env_file)
    if not source.exists():
        logger.error(f"Env file not found: {source}")
        sys.exit(1)

    original = dotenv_values(source)
    cleaned = clean_env(original)
    changed = [key for key in cleaned if cleaned[key] != (original[key] or "")]

    Path(args.output).write_text(render(cleaned))
    logger.info(f"Wrote {len(cleaned)} variables to {args.output}")
    for key in changed:
        logger.info(f"  cleaned {key}")
    if not changed:
        logger.info("  no values needed cleaning")


if __name__ == "__main__":
    main()
