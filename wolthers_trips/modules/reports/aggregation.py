"""
Regrouping of report rows already filtered and sorted by Postgres.

Groups keep the order in which their key first appears, so the database
ordering (due date, meeting date, transaction date) carries through.
"""

from typing import Any, Dict, Iterable, List, Optional

from wolthers_trips.config.roles_config import EXPENSE_GROUP_KEYS


def to_amount(value: Any) -> float:
    """Numeric columns may arrive as strings; missing amounts count as zero."""
    if value is None or value == "":
        return 0.0
    return float(value)


def _embedded(row: Dict[str, Any], relation: str, field: str) -> Optional[Any]:
    related = row.get(relation)
    if isinstance(related, list):
        related = related[0] if related else None
    if not related:
        return None
    return related.get(field)


def group_reimbursements(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Group reimbursement summary rows by (card due date, currency)."""
    groups: Dict[tuple, Dict[str, Any]] = {}
    for item in rows:
        key = (item.get("card_due_date"), item.get("expense_currency"))
        if key not in groups:
            groups[key] = {
                "due_date": item.get("card_due_date"),
                "currency": item.get("expense_currency"),
                "total_amount": 0.0,
                "total_usd_amount": 0.0,
                "employees": [],
                "total_expenses": 0,
            }
        group = groups[key]
        group["total_amount"] += to_amount(item.get("total_amount"))
        group["total_usd_amount"] += to_amount(item.get("total_usd_amount"))
        group["total_expenses"] += int(item.get("expense_count") or 0)
        group["employees"].append({
            "name": item.get("employee_name"),
            "email": item.get("employee_email"),
            "last_four": item.get("last_four_digits"),
            "amount": item.get("total_amount"),
            "usd_amount": item.get("total_usd_amount"),
            "expense_count": item.get("expense_count"),
            "trip_title": item.get("trip_title"),
        })
    for group in groups.values():
        group["total_amount"] = round(group["total_amount"], 2)
        group["total_usd_amount"] = round(group["total_usd_amount"], 2)
    return list(groups.values())


def group_meetings_by_confirmation(rows: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Count meetings per confirmation status with a short entry for each."""
    summary: Dict[str, Dict[str, Any]] = {}
    for meeting in rows:
        status = meeting.get("confirmation_status")
        if status not in summary:
            summary[status] = {"count": 0, "meetings": []}
        summary[status]["count"] += 1
        summary[status]["meetings"].append({
            "id": meeting.get("id"),
            "title": meeting.get("title"),
            "date": meeting.get("meeting_date"),
            "time": meeting.get("start_time"),
            "trip": _embedded(meeting, "trips", "title"),
            "location": _embedded(meeting, "company_locations", "name"),
            "contact": _embedded(meeting, "company_contacts", "full_name"),
            "follow_up_required": meeting.get("follow_up_required"),
        })
    return summary


def expense_group_key(expense: Dict[str, Any], group_by: str) -> Optional[str]:
    if group_by == "currency":
        return expense.get("currency")
    if group_by == "user":
        return _embedded(expense, "users", "full_name")
    if group_by == "trip":
        return _embedded(expense, "trips", "title")
    return expense.get("category")


def analyze_expenses(rows: Iterable[Dict[str, Any]], group_by: str = "category") -> Dict[str, Dict[str, Any]]:
    """Totals per group: amounts, distinct currencies/categories, billable and pending usd."""
    if group_by not in EXPENSE_GROUP_KEYS:
        group_by = "category"
    analysis: Dict[str, Dict[str, Any]] = {}
    for expense in rows:
        key = expense_group_key(expense, group_by)
        # JSON object keys must be strings; a missing join groups under "None"
        key = str(key)
        if key not in analysis:
            analysis[key] = {
                "total_amount": 0.0,
                "total_usd_amount": 0.0,
                "expense_count": 0,
                "currencies": [],
                "categories": [],
                "client_billable_amount": 0.0,
                "pending_reimbursement": 0.0,
                "expenses": [],
            }
        group = analysis[key]
        usd_amount = to_amount(expense.get("usd_amount"))
        group["total_amount"] += to_amount(expense.get("amount"))
        group["total_usd_amount"] += usd_amount
        group["expense_count"] += 1
        if expense.get("currency") not in group["currencies"]:
            group["currencies"].append(expense.get("currency"))
        if expense.get("category") not in group["categories"]:
            group["categories"].append(expense.get("category"))
        if expense.get("client_billable"):
            group["client_billable_amount"] += usd_amount
        if expense.get("reimbursement_status") == "pending":
            group["pending_reimbursement"] += usd_amount
        group["expenses"].append({
            "id": expense.get("id"),
            "amount": expense.get("amount"),
            "currency": expense.get("currency"),
            "category": expense.get("category"),
            "date": expense.get("transaction_date"),
            "user": _embedded(expense, "users", "full_name"),
            "trip": _embedded(expense, "trips", "title"),
        })
    for group in analysis.values():
        for field in ("total_amount", "total_usd_amount", "client_billable_amount", "pending_reimbursement"):
            group[field] = round(group[field], 2)
    return analysis
