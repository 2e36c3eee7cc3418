"""
Shared utilities for Group Availability API.

This module re-exports security helpers and availability-specific validators.
"""

from group_availability.api.security import (
    # Rate limiting
    check_rate_limit,
    get_client_ip,
    # Membership
    require_group_member,
)

from .validators import (
    parse_list,
    validate_day_index,
    validate_docname,
    validate_filter_mode,
    validate_status,
)

__all__ = [
    "check_rate_limit",
    "get_client_ip",
    "require_group_member",
    "parse_list",
    "validate_day_index",
    "validate_docname",
    "validate_filter_mode",
    "validate_status",
]
