"""
Add Company Type Script
Adds a value to company_type_enum (default 'broker') and moves a company
(default 'Wolthers & Associates') to that type.

DDL goes through an `exec_sql` RPC function; when the project does not
expose one, the SQL to run in the Supabase SQL editor is logged and the
script exits with status 1.
"""

import argparse
import logging
import sys
from typing import List, Optional

from supabase import Client

from wolthers_trips.config.roles_config import COMPANY_TYPES
from wolthers_trips.database.supabase_client import get_service_supabase

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ENUM_NAME = "company_type_enum"
DEFAULT_COMPANY = "Wolthers & Associates"


def add_value_sql(value: str) -> str:
    return f"ALTER TYPE {ENUM_NAME} ADD VALUE IF NOT EXISTS '{value}';"


def enum_value_exists(supabase: Client, value: str) -> bool:
    """Querying with an unknown enum value fails with 'invalid input value for enum'"""
    try:
        supabase.table("companies")\
            .select("id, name, company_type")\
            .eq("company_type", value)\
            .limit(1)\
            .execute()
        return True
    except Exception as e:
        if "invalid input value for enum" in str(e):
            return False
        raise


def add_enum_value(supabase: Client, value: str) -> bool:
    """Run the ALTER TYPE through the exec_sql RPC"""
    try:
        supabase.rpc("exec_sql", {"query": add_value_sql(value)}).execute()
        logger.info(f"Added '{value}' to {ENUM_NAME} via RPC")
        return True
    except Exception as e:
        logger.warning(f"RPC exec_sql not available: {e}")
        return False


def company_types_in_use(supabase: Client) -> List[str]:
    result = supabase.table("companies")\
        .select("id, name, company_type")\
        .order("name")\
        .execute()
    types = []
    for company in result.data or []:
        logger.info(f"  - {company['name']}: {company.get('company_type') or 'NULL'}")
        if company.get("company_type") and company["company_type"] not in types:
            types.append(company["company_type"])
    logger.info(f"company_type values in use: {', '.join(types) or 'none'}")
    return types


def update_company_type(supabase: Client, company_name: str, value: str) -> Optional[dict]:
    result = supabase.table("companies")\
        .update({"company_type": value})\
        .eq("name", company_name)\
        .execute()
    if not result.data:
        logger.error(f"Company '{company_name}' not found")
        return None
    company = result.data[0]
    logger.info(f"Updated {company['name']} ({company['id']}) to company_type '{company['company_type']}'")
    return company


def log_manual_steps(value: str):
    logger.warning("Automatic enum addition failed. Run this SQL in the Supabase SQL Editor:")
    logger.warning(add_value_sql(value))
    logger.warning("Then run this script again to update the company record.")


def run(supabase: Client, value: str, company_name: Optional[str]) -> int:
    company_types_in_use(supabase)

    if enum_value_exists(supabase, value):
        logger.info(f"'{value}' already exists in {ENUM_NAME}")
    else:
        if not add_enum_value(supabase, value) or not enum_value_exists(supabase, value):
            log_manual_steps(value)
            return 1
        logger.info(f"Verified '{value}' exists in {ENUM_NAME}")

    if company_name and update_company_type(supabase, company_name, value) is None:
        return 1
    logger.info("All operations completed successfully")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description=f"Add a value to {ENUM_NAME} and assign it to a company")
    parser.add_argument("--value", default="broker", help="Enum value to add (default: broker)")
    parser.add_argument("--company", default=DEFAULT_COMPANY, help="Company to update; empty string to skip")
    args = parser.parse_args(argv)

    if args.value not in COMPANY_TYPES:
        logger.warning(f"'{args.value}' is not one of the known company types: {', '.join(COMPANY_TYPES)}")
    try:
        code = run(get_service_supabase(), args.value, args.company or None)
    except Exception as e:
        logger.error(f"Error during enum operations: {e}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
