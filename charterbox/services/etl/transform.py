"""Business-rule derivations applied to a mapped import row."""

from typing import Any

from .constants import CAKE_AMOUNT_FIELD, CAKE_PACKAGE_NAME, PACKAGE_COUNTERS, PACKAGE_JSON_FIELD
from .reference import ReferenceData


def collapse_package_counters(
    row: dict[str, Any],
    reference: ReferenceData,
) -> list[dict[str, Any]]:
    """Turn pkg_* counters into priced package lines, removing the counters.

    Lines from a package JSON column come first and win over a counter for
    the same package name.
    """
    lines: list[dict[str, Any]] = list(row.pop("package_quantities", None) or [])
    lines.extend(row.pop(PACKAGE_JSON_FIELD, None) or [])
    seen = {line["package_name"].upper() for line in lines}
    yacht_id = row.get("yacht")

    for key, package_name in PACKAGE_COUNTERS.items():
        quantity = row.pop(key, 0) or 0
        if quantity <= 0 or package_name in seen:
            continue
        package = reference.find_package(yacht_id, package_name)
        lines.append({
            "package_id": package.id if package else "",
            "package_name": package_name,
            "quantity": quantity,
            "rate": package.rate if package else 0.0,
        })

    cake_amount = row.pop(CAKE_AMOUNT_FIELD, 0) or 0
    if cake_amount > 0:
        lines.append({
            "package_id": "",
            "package_name": CAKE_PACKAGE_NAME,
            "quantity": 1,
            "rate": cake_amount,
        })
    return lines


def transform_row(row: dict[str, Any], reference: ReferenceData) -> dict[str, Any]:
    """Derive package lines, totals and commission for a mapped row.

    Args:
        row: Import row after value conversion and package detection.
        reference: Yacht price lists and agent discount rates.

    Returns:
        The same row, updated in place.
    """
    lines = collapse_package_counters(row, reference)
    if lines:
        row["package_quantities"] = lines
        # Unpriced lines leave the key absent so a merge keeps the stored total
        derived_total = round(sum(line["quantity"] * line["rate"] for line in lines), 2)
        if not row.get("total_amount") and derived_total > 0:
            row["total_amount"] = derived_total

    if not row.get("commission_percentage"):
        discount = reference.discount_for(row.get("agent"))
        if discount:
            row["commission_percentage"] = discount

    percentage = row.get("commission_percentage") or 0
    total = row.get("total_amount") or 0
    if not row.get("commission_amount") and percentage and total:
        row["commission_amount"] = round(total * percentage / 100, 2)

    return row
