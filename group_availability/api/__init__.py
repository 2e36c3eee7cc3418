"""
Group Availability API

This module provides a modular API structure for shared weekly availability.

Structure:
    api/
    ├── __init__.py              # This file
    ├── availability/            # Availability domain
    │   └── __init__.py          # Re-exports from availability_api
    ├── shared/                  # Shared utilities
    │   ├── __init__.py          # Re-exports from security and validators
    │   └── validators.py        # Availability-specific validators
    ├── availability_api.py      # Whitelisted endpoints
    └── security.py              # Rate limiting and membership checks

Usage:
    frappe.call("group_availability.api.availability.get_group_availability", ...)
"""

from . import availability
from . import shared

__all__ = [
    "availability",
    "shared",
]
