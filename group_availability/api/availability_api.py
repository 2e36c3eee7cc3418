"""
Availability API Endpoints

Whitelisted functions for the group calendar frontend.
All endpoints require a logged-in member of the group:
- Rate limiting by IP address
- Membership check on the Availability Group
- Input validation

The rendering layer only lays out what these endpoints return; merge and
conflict outcomes are always decided here by the scheduling engine.
"""

import frappe
from frappe import _
from frappe.utils import cint
from typing import Any, Dict, List, Optional

# Import scheduling services
from group_availability.group_availability.scheduling.conflict import find_conflicts
from group_availability.group_availability.scheduling.interaction import AvailabilityEditor
from group_availability.group_availability.scheduling.intervals import (
	AvailabilityError,
	ConflictError,
	EntryValidationError,
	PersistenceError,
	TimeInterval,
)
from group_availability.group_availability.scheduling.merge import merge_intervals
from group_availability.group_availability.scheduling.overlap import (
	VisibilityState,
	grid_rows,
	member_label,
	overlap_grid,
	visible_intervals,
)
from group_availability.group_availability.scheduling.persistence import (
	load_availability,
	save_availability,
)
from group_availability.group_availability.scheduling.records import (
	format_hour_label,
	interval_payload,
	intervals_to_records,
	records_to_intervals,
	split_by_owner,
	weekday_name,
)
from group_availability.group_availability.scheduling.suggestions import (
	next_occurrence,
	suggest_meeting_times,
)

from group_availability.api.shared import (
	check_rate_limit,
	parse_list,
	require_group_member,
	validate_day_index,
	validate_docname,
	validate_filter_mode,
	validate_status,
)


logger = frappe.logger("group_availability")


def _load_group_intervals(group: str) -> List[TimeInterval]:
	try:
		return records_to_intervals(load_availability(group))
	except PersistenceError as e:
		frappe.throw(str(e))


def _submitted_intervals(intervals: Any, owner: str) -> List[TimeInterval]:
	"""
	Convierte los registros enviados por el cliente a intervalos del usuario.

	El owner siempre es el usuario de la sesión, nunca el enviado.
	"""
	records = []
	for record in parse_list(intervals, "intervals"):
		if not isinstance(record, dict):
			frappe.throw(_("Each interval must be an object"), frappe.ValidationError)
		records.append(dict(record, owner_id=owner))

	try:
		return records_to_intervals(records)
	except (AvailabilityError, ValueError, TypeError, KeyError) as e:
		frappe.throw(_(f"Invalid interval: {str(e)}"), frappe.ValidationError)


def _members_payload(doc, user: str) -> List[Dict[str, Any]]:
	members = doc.get_member_map()
	return [
		{"user": member, "label": member_label(member, user, members)}
		for member in members
	]


@frappe.whitelist(methods=['GET'])
def get_group_availability(group: str) -> Dict[str, Any]:
	"""
	Obtiene la disponibilidad de todos los miembros de un grupo.

	Rate limited: 30 requests per minute per IP.

	Args:
		group: nombre del Availability Group

	Returns:
		dict: {
			"members": [{"user": "ana@example.com", "label": "You"}, ...],
			"mine": [interval payloads del usuario de la sesión],
			"others": [interval payloads del resto (solo lectura)]
		}
	"""
	check_rate_limit("get_group_availability", limit=30, seconds=60)

	group = validate_docname(group, "group")
	doc = require_group_member(group)
	user = frappe.session.user

	mine, others = split_by_owner(_load_group_intervals(group), user)

	return {
		"members": _members_payload(doc, user),
		"mine": [interval_payload(i) for i in merge_intervals(mine)],
		"others": [interval_payload(i) for i in others],
	}


@frappe.whitelist(methods=['POST'])
def save_my_availability(group: str, intervals: Any) -> Dict[str, Any]:
	"""
	Guarda (reemplaza) la disponibilidad del usuario en el grupo.

	Rate limited: 10 requests per minute per IP.

	Args:
		group: nombre del Availability Group
		intervals: lista de IntervalRecord
			[{"day_index": 1, "start_time": "09:00:00", "end_time": "11:00:00",
			  "status": "available"}, ...]

	Returns:
		dict: {"saved": int, "records": [IntervalRecord canónicos]}

	Un error de persistencia se reporta pero no revierte la edición local;
	el usuario puede reintentar.
	"""
	check_rate_limit("save_my_availability", limit=10, seconds=60)

	group = validate_docname(group, "group")
	require_group_member(group)
	user = frappe.session.user

	try:
		canonical = merge_intervals(_submitted_intervals(intervals, user))
	except AvailabilityError as e:
		frappe.throw(_(str(e)), frappe.ValidationError)

	conflicts = find_conflicts(canonical)
	if conflicts:
		free, taken = conflicts[0]
		frappe.throw(
			_(f"{weekday_name(free.day)}: free time {format_hour_label(free.start)}-{format_hour_label(free.end)} "
			  f"overlaps busy time {format_hour_label(taken.start)}-{format_hour_label(taken.end)}"),
			frappe.ValidationError
		)

	records = intervals_to_records(canonical)

	try:
		saved = save_availability(user, group, records)
	except PersistenceError as e:
		frappe.throw(str(e))

	return {"saved": saved, "records": records}


@frappe.whitelist(methods=['POST'])
def add_exact_interval(
	group: str,
	day: Any,
	start_hour: Any,
	start_minute: Any,
	end_hour: Any,
	end_minute: Any,
	status: Optional[str] = None,
	intervals: Any = None
) -> Dict[str, Any]:
	"""
	Agrega un intervalo con horas exactas (entrada por formulario).

	Sigue el mismo pipeline que el drag: conflicto -> insertar -> merge.
	No persiste; el guardado es una acción explícita (save_my_availability).

	Args:
		group: nombre del Availability Group
		day: 0 (Sunday) .. 6 (Saturday)
		start_hour, start_minute, end_hour, end_minute: campos del formulario
		status: "available" o "busy" (por defecto "available")
		intervals: conjunto actual del cliente; si se omite se usa el guardado

	Returns:
		dict: {"intervals": [interval payloads canónicos]}
	"""
	check_rate_limit("add_exact_interval", limit=30, seconds=60)

	group = validate_docname(group, "group")
	require_group_member(group)
	user = frappe.session.user

	day = validate_day_index(day)
	status = validate_status(status)

	if intervals is None:
		current, _others = split_by_owner(_load_group_intervals(group), user)
	else:
		current = _submitted_intervals(intervals, user)

	try:
		editor = AvailabilityEditor(user, current)
		result = editor.add_exact_interval(day, start_hour, start_minute, end_hour, end_minute, status)
	except EntryValidationError as e:
		frappe.throw("<br>".join(_(error) for error in e.errors), frappe.ValidationError)
	except ConflictError as e:
		frappe.throw(_(f"Time conflicts with an existing interval: {str(e)}"), frappe.ValidationError)
	except AvailabilityError as e:
		frappe.throw(_(str(e)), frappe.ValidationError)

	return {"intervals": [interval_payload(i) for i in result]}


@frappe.whitelist(methods=['GET'])
def get_overlap_grid(
	group: str,
	visible: Any = None,
	overlap_filter: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Grilla de overlap para los miembros seleccionados.

	Args:
		group: nombre del Availability Group
		visible: lista de usuarios a mostrar (si se omite, solo el usuario;
			una lista vacía no muestra a nadie)
		overlap_filter: "none", "only_free_overlap" o "only_busy_overlap"

	Returns:
		dict: {
			"cells": [{"day", "hour", "count", "busy", "intensity", "passes_filter"}],
			"row_labels": ["8:00 AM", ...],
			"visible": [usuarios visibles],
			"editing_allowed": bool
		}
	"""
	check_rate_limit("get_overlap_grid", limit=60, seconds=60)

	group = validate_docname(group, "group")
	doc = require_group_member(group)
	user = frappe.session.user

	members = doc.get_member_map()
	# Sin parámetro se muestra solo el usuario; una lista vacía es "nadie visible"
	if visible is None:
		selected = [user]
	else:
		selected = [str(person) for person in parse_list(visible, "visible")]
	unknown = [person for person in selected if person != user and person not in members]
	if unknown:
		frappe.throw(_(f"Not a member of this group: {', '.join(unknown)}"), frappe.ValidationError)

	state = VisibilityState(
		local_person=user,
		visible=frozenset(selected),
		overlap_filter=validate_filter_mode(overlap_filter),
	)

	mine, others = split_by_owner(_load_group_intervals(group), user)
	shown = visible_intervals(state, mine, others)
	cells = overlap_grid(shown, state)

	return {
		"cells": cells,
		"row_labels": [format_hour_label(hour) for hour in grid_rows()],
		"visible": sorted(state.visible),
		"editing_allowed": state.is_editing_allowed,
	}


@frappe.whitelist(methods=['GET'])
def get_meeting_suggestions(group: str, top_n: int = 3) -> List[Dict[str, Any]]:
	"""
	Mejores horarios de reunión de la semana para el grupo.

	Args:
		group: nombre del Availability Group
		top_n: cantidad de sugerencias (por defecto 3)

	Returns:
		list[dict]: [
			{
				"day": 2,
				"day_name": "Tuesday",
				"start": 14.0,
				"end": 15.0,
				"label": "2:00 PM - 3:00 PM",
				"attendance": 3,
				"next_start": "2026-02-03T14:00:00-05:00",
				"next_end": "2026-02-03T15:00:00-05:00"
			},
			...
		]
	"""
	check_rate_limit("get_meeting_suggestions", limit=30, seconds=60)

	group = validate_docname(group, "group")
	doc = require_group_member(group)

	intervals = _load_group_intervals(group)
	group_size = len(doc.members) or len({i.owner for i in intervals})
	suggestions = suggest_meeting_times(intervals, group_size, cint(top_n))
	tz_name = doc.get_timezone_name()

	logger.debug(f"{len(suggestions)} suggestions for {group} (size {group_size})")

	result = []
	for suggestion in suggestions:
		occurrence = next_occurrence(suggestion, tz_name)
		result.append({
			"day": suggestion.day,
			"day_name": weekday_name(suggestion.day),
			"start": suggestion.start,
			"end": suggestion.end,
			"label": f"{format_hour_label(suggestion.start)} - {format_hour_label(suggestion.end)}",
			"attendance": suggestion.attendance,
			"next_start": occurrence["start"].isoformat(),
			"next_end": occurrence["end"].isoformat(),
		})

	return result
