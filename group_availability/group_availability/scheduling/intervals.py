"""
Interval Model

Canonical representation of a weekly availability interval:
- Owner, weekday (Sunday = 0), status (available/busy)
- Start/end as decimal hours on a quarter-hour grid inside [8.0, 22.0]

This module has no Frappe dependency so the engine can be tested in isolation.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional
from uuid import uuid4


DAY_START = 8.0
DAY_END = 22.0
GRANULARITY = 0.25
CELL_HOURS = 1
WEEKDAYS = range(7)


class Status(str, Enum):
	AVAILABLE = "available"
	BUSY = "busy"

	@property
	def opposite(self) -> "Status":
		return Status.BUSY if self is Status.AVAILABLE else Status.AVAILABLE


def new_interval_id() -> str:
	return uuid4().hex[:12]


@dataclass(frozen=True)
class TimeInterval:
	owner: str
	day: int
	status: Status
	start: float
	end: float
	id: str = field(default_factory=new_interval_id, compare=False)

	@property
	def duration(self) -> float:
		return self.end - self.start

	def covers(self, hour: float) -> bool:
		"""Contención semiabierta: start <= hour < end."""
		return self.start <= hour < self.end

	def overlaps(self, start: float, end: float) -> bool:
		return self.start < end and start < self.end

	def with_bounds(self, start: float, end: float) -> "TimeInterval":
		return replace(self, start=start, end=end)


class AvailabilityError(Exception):
	"""Base de los errores del motor de disponibilidad."""
	pass


class InvalidRangeError(AvailabilityError):
	"""Intervalo con límites inválidos."""
	pass


class ConflictError(AvailabilityError):
	"""Un intervalo se solapa con otro de estado opuesto del mismo dueño y día."""

	def __init__(self, message: str, conflicting: Optional[List[TimeInterval]] = None):
		super().__init__(message)
		self.conflicting = list(conflicting or [])


class EntryValidationError(AvailabilityError):
	"""Errores de validación de la entrada manual de horas."""

	def __init__(self, errors: List[str]):
		super().__init__("; ".join(errors))
		self.errors = list(errors)


class PersistenceError(AvailabilityError):
	"""Fallo al cargar o guardar disponibilidad."""
	pass


def coerce_status(value: Any) -> Status:
	"""
	Convierte un valor crudo (string del request o de la BD) a Status.

	Raises:
		InvalidRangeError: si el valor no es un estado conocido
	"""
	if isinstance(value, Status):
		return value
	try:
		return Status(str(value).strip().lower())
	except ValueError:
		raise InvalidRangeError(f"Unknown status: {value!r}")


def validate_interval(interval: TimeInterval) -> TimeInterval:
	"""
	Valida los límites de un intervalo.

	Args:
		interval: intervalo a validar

	Returns:
		TimeInterval: el mismo intervalo si es válido

	Raises:
		InvalidRangeError: si start >= end, algún límite cae fuera de
			[DAY_START, DAY_END], no cae en la grilla de cuarto de hora
			o el día no está en 0..6
	"""
	if interval.day not in WEEKDAYS:
		raise InvalidRangeError(f"Day must be between 0 and 6, got {interval.day}")

	if interval.start >= interval.end:
		raise InvalidRangeError(
			f"Start ({interval.start}) must be before end ({interval.end})"
		)

	if interval.start < DAY_START or interval.end > DAY_END:
		raise InvalidRangeError(
			f"Interval {interval.start}-{interval.end} is outside "
			f"{DAY_START}-{DAY_END}"
		)

	if not (on_grid(interval.start) and on_grid(interval.end)):
		raise InvalidRangeError(
			f"Interval {interval.start}-{interval.end} is not on the {int(GRANULARITY * 60)}-minute grid"
		)

	return interval


def on_grid(hour: float) -> bool:
	"""True si la hora es múltiplo de GRANULARITY."""
	steps = hour / GRANULARITY
	return abs(steps - round(steps)) < 1e-9


def snap_to_grid(hour: float) -> float:
	"""Redondea una hora al cuarto de hora más cercano."""
	return round(hour / GRANULARITY) * GRANULARITY


def clamp_hour(hour: float) -> float:
	return min(max(hour, DAY_START), DAY_END)
