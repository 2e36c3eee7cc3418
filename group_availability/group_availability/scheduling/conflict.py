"""
Conflict Checker

Rejects edits that would make an available interval and a busy interval of the
same owner overlap on the same day. Same-status overlaps are not conflicts;
the merge engine coalesces them.
"""

from typing import Any, Dict, Iterable, List, Tuple

from .intervals import ConflictError, Status, TimeInterval


def check_conflict(
	candidate: TimeInterval,
	existing: Iterable[TimeInterval]
) -> Dict[str, Any]:
	"""
	Detecta conflictos de un intervalo candidato con intervalos existentes.

	Args:
		candidate: intervalo propuesto (nuevo o redimensionado)
		existing: intervalos actuales del dueño

	Returns:
		dict: {
			"has_conflict": bool,
			"conflicting_intervals": [list of TimeInterval]
		}

	Hay conflicto si existe un intervalo con el mismo (owner, day), estado
	opuesto, y candidate.start < other.end AND other.start < candidate.end.
	El propio candidato (mismo id) se ignora.
	"""
	conflicting = [
		other
		for other in existing
		if other.id != candidate.id
		and other.owner == candidate.owner
		and other.day == candidate.day
		and other.status != candidate.status
		and other.overlaps(candidate.start, candidate.end)
	]

	return {
		"has_conflict": bool(conflicting),
		"conflicting_intervals": conflicting,
	}


def ensure_no_conflict(candidate: TimeInterval, existing: Iterable[TimeInterval]) -> None:
	"""Raises ConflictError si el candidato choca con un intervalo de estado opuesto."""
	result = check_conflict(candidate, existing)

	if result["has_conflict"]:
		other = result["conflicting_intervals"][0]
		raise ConflictError(
			f"{candidate.status.value.capitalize()} time {candidate.start}-{candidate.end} "
			f"overlaps {other.status.value} time {other.start}-{other.end}",
			result["conflicting_intervals"],
		)


def find_conflicts(intervals: List[TimeInterval]) -> List[Tuple[TimeInterval, TimeInterval]]:
	"""
	Pares (available, busy) que se solapan dentro de un conjunto completo.

	Se usa para verificar un conjunto recibido de afuera (ej. al guardar)
	que no pasó por el editor.
	"""
	available = [i for i in intervals if i.status is Status.AVAILABLE]
	busy = [i for i in intervals if i.status is Status.BUSY]

	return [
		(free, taken)
		for free in available
		for taken in busy
		if free.owner == taken.owner
		and free.day == taken.day
		and free.overlaps(taken.start, taken.end)
	]
