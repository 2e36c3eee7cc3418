# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Availability Group DocType

Grupo de personas que comparten su disponibilidad semanal.
Define la zona horaria del grupo y sus miembros.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from typing import Any, Dict
import pytz


class AvailabilityGroup(Document):
	"""
	Availability Group with member and timezone validation.

	Validations:
	- group_name required
	- No duplicated members
	- Timezone must be a valid pytz zone (or "system timezone")
	"""

	def validate(self) -> None:
		self._validate_group_name()
		self._validate_members()
		self._validate_timezone()

	def _validate_group_name(self) -> None:
		if not self.group_name:
			frappe.throw(_("Group Name is required"))

	def _validate_members(self) -> None:
		"""Valida que cada usuario aparezca una sola vez."""
		seen = set()
		for idx, member in enumerate(self.members, 1):
			if member.user in seen:
				frappe.throw(_(f"Row {idx}: {member.user} is already a member"))
			seen.add(member.user)

	def _validate_timezone(self) -> None:
		if not self.timezone or self.timezone == "system timezone":
			return
		if self.timezone not in pytz.all_timezones_set:
			frappe.throw(_(f"Invalid timezone: {self.timezone}"))

	def get_timezone_name(self) -> str:
		"""
		Zona horaria efectiva del grupo.

		"system timezone" o vacío -> zona del sistema; inválida -> UTC.
		"""
		tz_name = self.timezone or "system timezone"
		if tz_name == "system timezone":
			tz_name = frappe.utils.get_system_timezone()

		if tz_name not in pytz.all_timezones_set:
			frappe.log_error(
				f"Invalid timezone '{tz_name}' for {self.name}, usando UTC",
				"Availability Group"
			)
			return "UTC"

		return tz_name

	def get_member_map(self) -> Dict[str, Dict[str, Any]]:
		"""{user: {"display_name": ..., "email": ...}}"""
		return {
			member.user: {"display_name": member.display_name, "email": member.user}
			for member in self.members
		}

	def is_member(self, user: str) -> bool:
		return any(member.user == user for member in self.members)
