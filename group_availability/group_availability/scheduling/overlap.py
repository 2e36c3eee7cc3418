"""
Overlap / Visibility Service

Computes group overlap for the members currently selected for display:
- Visible interval set (local person + toggled members)
- Distinct-owner counts at a (day, hour) point
- "Only show overlap" filtering (free or busy, mutually exclusive)
- Heat buckets and per-cell grid payloads for the rendering layer
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from .intervals import CELL_HOURS, DAY_END, DAY_START, WEEKDAYS, Status, TimeInterval


class OverlapFilter(str, Enum):
	NONE = "none"
	ONLY_FREE_OVERLAP = "only_free_overlap"
	ONLY_BUSY_OVERLAP = "only_busy_overlap"


@dataclass(frozen=True)
class VisibilityState:
	"""
	Snapshot inmutable de qué miembros se muestran y qué filtro está activo.

	Cada acción del usuario produce un snapshot nuevo.
	"""
	local_person: str
	visible: FrozenSet[str] = field(default_factory=frozenset)
	overlap_filter: OverlapFilter = OverlapFilter.NONE

	@classmethod
	def initial(cls, local_person: str) -> "VisibilityState":
		return cls(local_person=local_person, visible=frozenset([local_person]))

	def toggle(self, person_id: str) -> "VisibilityState":
		if person_id in self.visible:
			return replace(self, visible=self.visible - {person_id})
		return replace(self, visible=self.visible | {person_id})

	def with_filter(self, mode: OverlapFilter) -> "VisibilityState":
		"""
		Activa un modo de filtro. Los dos modos de overlap son excluyentes:
		activar uno reemplaza al otro, y reactivar el modo activo lo apaga.
		"""
		mode = OverlapFilter(mode)
		if mode is not OverlapFilter.NONE and mode is self.overlap_filter:
			mode = OverlapFilter.NONE
		return replace(self, overlap_filter=mode)

	@property
	def is_editing_allowed(self) -> bool:
		"""Solo se edita cuando el usuario local es el único visible."""
		return self.visible == frozenset([self.local_person])

	@property
	def self_visible(self) -> bool:
		return self.local_person in self.visible


def visible_intervals(
	visibility: VisibilityState,
	mine: Iterable[TimeInterval],
	others: Iterable[TimeInterval]
) -> List[TimeInterval]:
	"""Mis intervalos (si estoy visible) + los de los demás miembros visibles."""
	result = list(mine) if visibility.self_visible else []
	result.extend(other for other in others if other.owner in visibility.visible)
	return result


def _owners_with_status(
	day: int,
	hour: float,
	status: Status,
	intervals: Iterable[TimeInterval]
) -> set:
	return {
		interval.owner
		for interval in intervals
		if interval.day == day and interval.status == status and interval.covers(hour)
	}


def overlap_count(day: int, hour: float, intervals: Iterable[TimeInterval]) -> int:
	"""Cantidad de dueños distintos disponibles en (day, hour)."""
	return len(_owners_with_status(day, hour, Status.AVAILABLE, intervals))


def busy_count(day: int, hour: float, intervals: Iterable[TimeInterval]) -> int:
	"""Cantidad de dueños distintos ocupados en (day, hour)."""
	return len(_owners_with_status(day, hour, Status.BUSY, intervals))


def passes_overlap_filter(
	day: int,
	hour: float,
	mode: OverlapFilter,
	intervals: Iterable[TimeInterval]
) -> bool:
	mode = OverlapFilter(mode)

	if mode is OverlapFilter.ONLY_FREE_OVERLAP:
		return overlap_count(day, hour, intervals) >= 2
	if mode is OverlapFilter.ONLY_BUSY_OVERLAP:
		return busy_count(day, hour, intervals) >= 2
	return True


def overlap_intensity(count: int, visible_size: int) -> Optional[str]:
	"""
	Balde de intensidad para colorear una celda.

	Returns:
		"full" si todos los visibles están libres, "high" si al menos la
		mitad, "low" si alguno, None si nadie o si solo hay un visible.
	"""
	if visible_size <= 1 or count <= 0:
		return None
	if count >= visible_size:
		return "full"
	if count / visible_size >= 0.5:
		return "high"
	return "low"


def grid_rows() -> List[float]:
	"""Horas de inicio de cada fila de la grilla (8, 9, ..., 21)."""
	rows = []
	hour = DAY_START
	while hour < DAY_END:
		rows.append(hour)
		hour += CELL_HOURS
	return rows


def overlap_grid(
	intervals: List[TimeInterval],
	visibility: VisibilityState
) -> List[Dict[str, Any]]:
	"""
	Genera una celda por (día, fila horaria) para la capa de render.

	Returns:
		list[dict]: [
			{
				"day": 1,
				"hour": 9.0,
				"count": 2,
				"busy": 0,
				"intensity": "full",
				"passes_filter": True
			},
			...
		]
	"""
	visible_size = len(visibility.visible)
	cells = []

	for day in WEEKDAYS:
		for hour in grid_rows():
			count = overlap_count(day, hour, intervals)
			cells.append({
				"day": day,
				"hour": hour,
				"count": count,
				"busy": busy_count(day, hour, intervals),
				"intensity": overlap_intensity(count, visible_size),
				"passes_filter": passes_overlap_filter(
					day, hour, visibility.overlap_filter, intervals
				),
			})

	return cells


def member_label(
	person_id: str,
	local_person: str,
	members: Mapping[str, Mapping[str, Any]]
) -> str:
	"""
	Nombre a mostrar para un miembro: "You" para el usuario local, luego
	display_name, luego email, y "Unknown" si no hay nada.
	"""
	if person_id == local_person:
		return "You"

	member = members.get(person_id) or {}
	return member.get("display_name") or member.get("email") or "Unknown"
