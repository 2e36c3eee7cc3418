"""
Security Utilities for Availability APIs

Provides rate limiting and group membership checks for the whitelisted
availability endpoints.
"""

import frappe
from frappe import _
from frappe.utils import cint


# ===================
# Rate Limiting
# ===================

def check_rate_limit(action: str, limit: int = 10, seconds: int = 60) -> None:
    """
    Check rate limit for an action by IP address.

    Uses Frappe's cache (Redis) to track request counts per IP.

    Args:
        action: Identifier for the action being rate limited
        limit: Maximum number of requests allowed
        seconds: Time window in seconds

    Raises:
        frappe.TooManyRequestsError: If rate limit exceeded
    """
    ip = get_client_ip()
    cache_key = f"rate_limit:group_availability:{action}:{ip}"

    current = cint(frappe.cache.get_value(cache_key) or 0)

    if current >= limit:
        frappe.log_error(
            title=_("Rate Limit Exceeded"),
            message=f"IP: {ip}, Action: {action}, Limit: {limit}/{seconds}s"
        )
        frappe.throw(
            _("Too many requests. Please wait a moment and try again."),
            frappe.TooManyRequestsError
        )

    frappe.cache.set_value(cache_key, current + 1, expires_in_sec=seconds)


def get_client_ip() -> str:
    """
    Get the real client IP address, handling proxies.

    Returns:
        str: Client IP address
    """
    if not getattr(frappe.local, "request", None):
        return "local"

    forwarded_for = frappe.request.headers.get('X-Forwarded-For', '')
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(',')[0].strip()

    real_ip = frappe.request.headers.get('X-Real-IP', '')
    if real_ip:
        return real_ip.strip()

    return frappe.request.remote_addr or 'unknown'


# ===================
# Group Membership
# ===================

def require_group_member(group: str):
    """
    Load an Availability Group and ensure the session user belongs to it.

    Args:
        group: Availability Group name

    Returns:
        Document: the Availability Group

    Raises:
        frappe.DoesNotExistError: If the group does not exist
        frappe.PermissionError: If the session user is not a member
    """
    if not frappe.db.exists("Availability Group", group):
        frappe.throw(_(f"Availability Group '{group}' does not exist"), frappe.DoesNotExistError)

    doc = frappe.get_doc("Availability Group", group)

    if not doc.is_member(frappe.session.user):
        frappe.throw(_("You are not a member of this group"), frappe.PermissionError)

    return doc
