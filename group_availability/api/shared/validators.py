"""
Availability-specific Validators

Validation utilities for request parameters of the availability API.
"""

import re
import frappe
from frappe import _
from typing import Any, List, Optional

from group_availability.group_availability.scheduling.intervals import Status, WEEKDAYS
from group_availability.group_availability.scheduling.overlap import OverlapFilter


def validate_docname(name: str, field_name: str = "name") -> str:
    """
    Validate a document name (ID).

    Ensures the name is not too long and doesn't contain injection patterns.

    Args:
        name: Document name to validate
        field_name: Name of field for error messages

    Returns:
        str: Validated document name

    Raises:
        frappe.ValidationError: If name is invalid
    """
    if not name:
        frappe.throw(_(f"{field_name} is required"), frappe.ValidationError)

    name = str(name).strip()

    if len(name) > 140:
        frappe.throw(_(f"{field_name} is too long"), frappe.ValidationError)

    # Block obvious injection attempts
    dangerous_patterns = [
        r"<script",
        r"javascript:",
        r"onclick",
        r"onerror",
        r"SELECT\s+",
        r"INSERT\s+",
        r"UPDATE\s+",
        r"DELETE\s+",
        r"DROP\s+",
        r"UNION\s+",
        r"--",
        r";",
    ]

    for pattern in dangerous_patterns:
        if re.search(pattern, name, re.IGNORECASE):
            frappe.throw(_(f"Invalid {field_name}"), frappe.ValidationError)

    return name


def validate_day_index(day: Any, field_name: str = "day") -> int:
    """
    Validate a weekday index (0 = Sunday ... 6 = Saturday).

    Raises:
        frappe.ValidationError: If day is missing or out of range
    """
    try:
        day = int(day)
    except (TypeError, ValueError):
        frappe.throw(_(f"{field_name} must be a number between 0 and 6"), frappe.ValidationError)

    if day not in WEEKDAYS:
        frappe.throw(_(f"{field_name} must be between 0 and 6"), frappe.ValidationError)

    return day


def validate_status(status: Optional[str], field_name: str = "status") -> Optional[Status]:
    """
    Validate an interval status ("available" or "busy"). Empty means default.

    Raises:
        frappe.ValidationError: If status is unknown
    """
    if not status:
        return None

    try:
        return Status(str(status).strip().lower())
    except ValueError:
        frappe.throw(_(f"Invalid {field_name}. Use 'available' or 'busy'"), frappe.ValidationError)


def validate_filter_mode(mode: Optional[str]) -> OverlapFilter:
    """
    Validate an overlap filter mode.

    Raises:
        frappe.ValidationError: If mode is unknown
    """
    if not mode:
        return OverlapFilter.NONE

    try:
        return OverlapFilter(str(mode).strip().lower())
    except ValueError:
        frappe.throw(
            _("Invalid overlap_filter. Use 'none', 'only_free_overlap' or 'only_busy_overlap'"),
            frappe.ValidationError,
        )


def parse_list(value: Any, field_name: str = "value") -> List[Any]:
    """
    Accept a list or a JSON-encoded list (as sent by frappe.call).

    Raises:
        frappe.ValidationError: If value is not a list
    """
    if value is None or value == "":
        return []

    if isinstance(value, str):
        value = frappe.parse_json(value)

    if not isinstance(value, list):
        frappe.throw(_(f"{field_name} must be a list"), frappe.ValidationError)

    return value
