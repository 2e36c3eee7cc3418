"""
Interaction State Machine

Turns pointer gestures on the weekly grid into interval edits of the local
person:
- Drag-select on cells (add or remove hourly ranges)
- Edge drag on an interval (resize start or end)
- Exact-time entry (non-pointer path)
- Click on one of my blocks (remove that block)

Every additive edit goes through the conflict checker and the merge engine.
A rejected edit leaves the interval set untouched.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .conflict import check_conflict, ensure_no_conflict
from .intervals import (
	CELL_HOURS,
	DAY_END,
	DAY_START,
	GRANULARITY,
	WEEKDAYS,
	EntryValidationError,
	Status,
	TimeInterval,
	clamp_hour,
	coerce_status,
	snap_to_grid,
	validate_interval,
)
from .merge import merge_intervals
from .overlap import VisibilityState
from .records import intervals_to_records


class EditorState(str, Enum):
	IDLE = "idle"
	DRAGGING = "dragging"
	RESIZING = "resizing"


class DragMode(str, Enum):
	ADD = "add"
	REMOVE = "remove"


class Edge(str, Enum):
	START = "start"
	END = "end"


@dataclass(frozen=True)
class DragSession:
	day: int
	anchor_hour: float
	current_hour: float
	mode: DragMode

	@property
	def bounds(self):
		"""(lo, hi): una celda en la hora h cubre [h, h + 1)."""
		lo = min(self.anchor_hour, self.current_hour)
		hi = max(self.anchor_hour, self.current_hour) + CELL_HOURS
		return lo, hi


@dataclass(frozen=True)
class ResizeSession:
	interval_id: str
	edge: Edge
	day: int


def pixel_to_hour(y: float, grid_height: float) -> float:
	"""
	Mapea un offset vertical en píxeles a una hora de la grilla.

	Interpolación lineal sobre [DAY_START, DAY_END], ajustada al cuarto de
	hora y acotada al dominio.
	"""
	if grid_height <= 0:
		raise ValueError("grid_height must be positive")

	hour = DAY_START + (y / grid_height) * (DAY_END - DAY_START)
	return clamp_hour(snap_to_grid(hour))


def validate_exact_entry(
	day: Any,
	start_hour: Any,
	start_minute: Any,
	end_hour: Any,
	end_minute: Any
) -> List[str]:
	"""
	Valida la entrada manual de horario.

	Returns:
		list[str]: mensajes de error para el usuario (vacía si es válida)
	"""
	errors: List[str] = []
	fields = {
		"Start hour": start_hour,
		"Start minute": start_minute,
		"End hour": end_hour,
		"End minute": end_minute,
	}

	values: Dict[str, int] = {}
	for label, raw in fields.items():
		if raw is None or str(raw).strip() == "":
			errors.append(f"{label} is required")
			continue
		try:
			values[label] = int(str(raw).strip())
		except ValueError:
			errors.append(f"{label} must be a whole number")

	try:
		if int(day) not in WEEKDAYS:
			errors.append("Day must be between 0 (Sunday) and 6 (Saturday)")
	except (TypeError, ValueError):
		errors.append("Day is required")

	if errors:
		return errors

	for label in ("Start minute", "End minute"):
		if not 0 <= values[label] <= 59:
			errors.append(f"{label} must be between 0 and 59")
		elif values[label] % int(GRANULARITY * 60):
			errors.append(f"{label} must be 0, 15, 30 or 45")

	if errors:
		return errors

	start = values["Start hour"] + values["Start minute"] / 60
	end = values["End hour"] + values["End minute"] / 60

	if end <= start:
		errors.append("End time must be after start time")

	if start < DAY_START or end > DAY_END:
		errors.append("Times must be between 8:00 AM and 10:00 PM")

	return errors


class AvailabilityEditor:
	"""
	Estado de edición del usuario local.

	Estados: idle -> dragging -> idle, idle -> resizing -> idle. Son
	excluyentes: mientras hay un resize en curso no se inician drags.

	Solo los intervalos del dueño local son mutables; los del resto del
	grupo se consultan vía overlap.visible_intervals.
	"""

	def __init__(
		self,
		owner: str,
		intervals: Iterable[TimeInterval] = (),
		visibility: Optional[VisibilityState] = None,
		creation_status: Status = Status.AVAILABLE
	):
		self.owner = owner
		self.intervals: List[TimeInterval] = merge_intervals(
			i for i in intervals if i.owner == owner
		)
		self.visibility = visibility or VisibilityState.initial(owner)
		self.creation_status = coerce_status(creation_status)
		self.drag: Optional[DragSession] = None
		self.resize: Optional[ResizeSession] = None
		self._resize_origin: Optional[TimeInterval] = None

	@property
	def state(self) -> EditorState:
		if self.resize is not None:
			return EditorState.RESIZING
		if self.drag is not None:
			return EditorState.DRAGGING
		return EditorState.IDLE

	@property
	def can_edit(self) -> bool:
		return self.visibility.is_editing_allowed

	def set_visibility(self, visibility: VisibilityState) -> None:
		self.visibility = visibility

	def toggle_creation_status(self) -> Status:
		self.creation_status = self.creation_status.opposite
		return self.creation_status

	def find(self, interval_id: str) -> Optional[TimeInterval]:
		return next((i for i in self.intervals if i.id == interval_id), None)

	def has_interval_at(self, day: int, hour: float) -> bool:
		return any(i.day == day and i.covers(hour) for i in self.intervals)

	# -------------------
	# Drag-select
	# -------------------

	def pointer_down_cell(self, day: int, hour: float) -> Optional[DragSession]:
		"""
		Inicia un drag sobre una celda.

		El modo es REMOVE si la celda ya pertenece a uno de mis intervalos,
		si no ADD. Se ignora si no se puede editar o hay otro gesto activo.
		"""
		if not self.can_edit or self.state is not EditorState.IDLE:
			return None

		mode = DragMode.REMOVE if self.has_interval_at(day, hour) else DragMode.ADD
		self.drag = DragSession(day=day, anchor_hour=hour, current_hour=hour, mode=mode)
		return self.drag

	def pointer_move_cell(self, day: int, hour: float) -> Optional[DragSession]:
		# La selección queda confinada al día donde empezó el gesto
		if self.drag is not None and day == self.drag.day:
			self.drag = replace(self.drag, current_hour=hour)
		return self.drag

	def is_in_drag_selection(self, day: int, hour: float) -> bool:
		if self.drag is None or day != self.drag.day:
			return False
		lo, hi = self.drag.bounds
		return lo <= hour < hi

	def _commit_drag(self, session: DragSession) -> List[TimeInterval]:
		lo, hi = session.bounds

		if session.mode is DragMode.ADD:
			candidate = TimeInterval(
				owner=self.owner,
				day=session.day,
				status=self.creation_status,
				start=lo,
				end=min(hi, DAY_END),
			)
			return self._insert(candidate)

		# Se borran enteros los intervalos que tocan el rango, sin recortar
		self.intervals = [
			interval
			for interval in self.intervals
			if not (interval.day == session.day and interval.overlaps(lo, hi))
		]
		return self.intervals

	def _insert(self, candidate: TimeInterval) -> List[TimeInterval]:
		"""
		Pipeline de alta: validar -> conflicto -> quitar encerrados -> merge.

		Raises:
			InvalidRangeError, ConflictError: el estado no se modifica
		"""
		validate_interval(candidate)
		ensure_no_conflict(candidate, self.intervals)

		kept = [
			interval
			for interval in self.intervals
			if not (
				interval.day == candidate.day
				and interval.status == candidate.status
				and interval.start >= candidate.start
				and interval.end <= candidate.end
			)
		]
		self.intervals = merge_intervals(kept + [candidate])
		return self.intervals

	# -------------------
	# Edge resize
	# -------------------

	def pointer_down_edge(self, interval_id: str, edge: Edge) -> Optional[ResizeSession]:
		if not self.can_edit or self.state is not EditorState.IDLE:
			return None

		interval = self.find(interval_id)
		if interval is None:
			return None

		self.resize = ResizeSession(interval_id=interval_id, edge=Edge(edge), day=interval.day)
		self._resize_origin = interval
		return self.resize

	def pointer_move_edge(self, y: float, grid_height: float) -> Optional[TimeInterval]:
		"""
		Mueve el borde activo a la hora bajo el puntero.

		El borde se acota para conservar un span mínimo de GRANULARITY. Si la
		nueva posición choca con un intervalo de estado opuesto, el borde
		queda en su última posición válida.
		"""
		if self.resize is None:
			return None

		interval = self.find(self.resize.interval_id)
		hour = pixel_to_hour(y, grid_height)

		if self.resize.edge is Edge.START:
			candidate = interval.with_bounds(min(hour, interval.end - GRANULARITY), interval.end)
		else:
			candidate = interval.with_bounds(interval.start, max(hour, interval.start + GRANULARITY))

		if check_conflict(candidate, self.intervals)["has_conflict"]:
			return interval

		self.intervals = [candidate if i.id == interval.id else i for i in self.intervals]
		return candidate

	# -------------------
	# Gesture end
	# -------------------

	def pointer_up(self) -> List[TimeInterval]:
		"""
		Termina el gesto activo y confirma la edición.

		Raises:
			ConflictError: un drag ADD chocó con un intervalo opuesto; el
				gesto se descarta sin cambios
		"""
		if self.resize is not None:
			self.resize = None
			self._resize_origin = None
			self.intervals = merge_intervals(self.intervals)
			return self.intervals

		session, self.drag = self.drag, None
		if session is None:
			return self.intervals

		return self._commit_drag(session)

	# El puntero saliendo de la grilla confirma igual que soltarlo
	pointer_leave = pointer_up

	def cancel(self) -> None:
		"""Descarta el gesto activo sin cambios."""
		if self._resize_origin is not None:
			origin = self._resize_origin
			self.intervals = [origin if i.id == origin.id else i for i in self.intervals]
		self.drag = None
		self.resize = None
		self._resize_origin = None

	# -------------------
	# Exact-time entry
	# -------------------

	def add_exact_interval(
		self,
		day: Any,
		start_hour: Any,
		start_minute: Any,
		end_hour: Any,
		end_minute: Any,
		status: Optional[Status] = None
	) -> List[TimeInterval]:
		"""
		Agrega un intervalo a partir de horas exactas.

		Raises:
			EntryValidationError: campos faltantes o fuera de dominio
			ConflictError: choca con un intervalo de estado opuesto
		"""
		errors = validate_exact_entry(day, start_hour, start_minute, end_hour, end_minute)
		if errors:
			raise EntryValidationError(errors)

		candidate = TimeInterval(
			owner=self.owner,
			day=int(day),
			status=coerce_status(status or self.creation_status),
			start=int(start_hour) + int(start_minute) / 60,
			end=int(end_hour) + int(end_minute) / 60,
		)
		return self._insert(candidate)

	# -------------------
	# Single-block removal
	# -------------------

	def remove_interval(self, interval_id: str) -> List[TimeInterval]:
		"""
		Borra un único intervalo propio (click sobre el bloque).

		Se ignora si no se puede editar o hay un gesto activo; el resto de
		los intervalos no se toca.
		"""
		if not self.can_edit or self.state is not EditorState.IDLE:
			return self.intervals

		self.intervals = [i for i in self.intervals if i.id != interval_id]
		return self.intervals

	def to_records(self) -> List[Dict[str, Any]]:
		return intervals_to_records(self.intervals)
