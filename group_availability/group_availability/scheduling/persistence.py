"""
Availability Persistence

Frappe-backed implementation of the engine's persistence boundary:
- load_availability: every Availability Interval row of a group
- save_availability: full replace of one owner's rows in one group
"""

import frappe
from frappe import _
from typing import Any, Dict, List

from .intervals import PersistenceError


INTERVAL_FIELDS = ["name", "owner_id", "day_index", "start_time", "end_time", "status"]


def load_availability(group_id: str) -> List[Dict[str, Any]]:
	"""
	Carga los IntervalRecord de todos los miembros de un grupo.

	Args:
		group_id: nombre del Availability Group

	Returns:
		list[dict]: [
			{
				"name": "AVI-00001",
				"owner_id": "user@example.com",
				"day_index": 1,
				"start_time": timedelta(hours=9),
				"end_time": timedelta(hours=11),
				"status": "available"
			},
			...
		]

	Raises:
		PersistenceError: si la consulta falla
	"""
	try:
		return frappe.get_all(
			"Availability Interval",
			filters={"availability_group": group_id},
			fields=INTERVAL_FIELDS,
			order_by="owner_id asc, day_index asc, start_time asc",
		)
	except Exception as e:
		frappe.log_error(f"Error loading availability for {group_id}: {str(e)}", "Load Availability")
		raise PersistenceError(_("Could not load availability for this group")) from e


def save_availability(owner_id: str, group_id: str, records: List[Dict[str, Any]]) -> int:
	"""
	Reemplaza la disponibilidad de un usuario en un grupo.

	Args:
		owner_id: usuario dueño de los registros
		group_id: nombre del Availability Group
		records: IntervalRecord canónicos (post-merge)

	Returns:
		int: cantidad de registros guardados

	Algoritmo:
		1. Borrar los registros existentes de (owner_id, group_id)
		2. Insertar los nuevos registros
		3. Commit

	El último guardado gana; no hay bloqueo entre guardados concurrentes.
	Un fallo NO revierte el estado en memoria del editor.

	Raises:
		PersistenceError: si el borrado o la inserción fallan
	"""
	try:
		frappe.db.delete(
			"Availability Interval",
			{"owner_id": owner_id, "availability_group": group_id},
		)

		for record in records:
			frappe.get_doc({
				"doctype": "Availability Interval",
				"availability_group": group_id,
				"owner_id": owner_id,
				"day_index": record["day_index"],
				"start_time": record["start_time"],
				"end_time": record["end_time"],
				"status": record["status"],
			}).insert(ignore_permissions=True)

		frappe.db.commit()

	except Exception as e:
		frappe.db.rollback()
		frappe.log_error(
			f"Error saving availability for {owner_id} in {group_id}: {str(e)}",
			"Save Availability"
		)
		raise PersistenceError(_("Error saving schedule. Please try again.")) from e

	frappe.logger("group_availability").info(
		f"Saved {len(records)} availability records for {owner_id} in {group_id}"
	)

	return len(records)
