"""
Availability API Domain

Handles loading/saving a member's weekly availability, exact-time edits,
group overlap and meeting suggestions.
"""

from group_availability.api.availability_api import (
    # Load / save
    get_group_availability,
    save_my_availability,
    # Editing
    add_exact_interval,
    # Group views
    get_overlap_grid,
    get_meeting_suggestions,
)

__all__ = [
    "get_group_availability",
    "save_my_availability",
    "add_exact_interval",
    "get_overlap_grid",
    "get_meeting_suggestions",
]
