# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Availability Interval DocType

Un intervalo semanal (libre u ocupado) de un miembro dentro de un grupo.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from group_availability.group_availability.scheduling.conflict import check_conflict
from group_availability.group_availability.scheduling.intervals import (
	AvailabilityError,
	validate_interval,
)
from group_availability.group_availability.scheduling.records import (
	format_clock,
	record_to_interval,
	records_to_intervals,
)


class AvailabilityInterval(Document):
	"""
	Availability Interval with engine validation.

	Validations:
	- Bounds inside the daily grid and start < end
	- No overlap with an opposite-status interval of the same owner, group and day
	"""

	def validate(self) -> None:
		self._validate_bounds()
		self._validate_no_conflict()

	def _as_interval(self):
		return record_to_interval({
			"name": self.name,
			"owner_id": self.owner_id,
			"day_index": self.day_index,
			"start_time": self.start_time,
			"end_time": self.end_time,
			"status": self.status,
		})

	def _validate_bounds(self) -> None:
		try:
			validate_interval(self._as_interval())
		except (AvailabilityError, ValueError) as e:
			frappe.throw(_(str(e)), frappe.ValidationError)

	def _validate_no_conflict(self) -> None:
		"""
		Valida que no se solape con un intervalo de estado opuesto.

		Dos intervalos chocan si:
		- Mismo owner_id, grupo y day_index
		- Estado opuesto
		- start < other.end AND other.start < end
		"""
		siblings = frappe.get_all(
			"Availability Interval",
			filters={
				"availability_group": self.availability_group,
				"owner_id": self.owner_id,
				"day_index": self.day_index,
				"name": ["!=", self.name or ""],
			},
			fields=["name", "owner_id", "day_index", "start_time", "end_time", "status"],
		)

		candidate = self._as_interval()
		result = check_conflict(candidate, records_to_intervals(siblings))

		if result["has_conflict"]:
			other = result["conflicting_intervals"][0]
			frappe.throw(
				_(f"{self.status} time {format_clock(candidate.start)}-{format_clock(candidate.end)} "
				  f"overlaps {other.status.value} time {format_clock(other.start)}-{format_clock(other.end)}"),
				frappe.ValidationError
			)
