"""
Interval Records

Conversion between the persisted/wire form of availability
({owner_id, day_index, start_time "HH:MM:SS", end_time, status}) and the
engine's TimeInterval, plus display helpers for weekdays and hours.

Clock strings are parsed here instead of through frappe.utils.get_time so the
engine keeps importing without Frappe.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Tuple, Union

from .intervals import TimeInterval, coerce_status, new_interval_id


WEEKDAY_NAMES = [
	"Sunday",
	"Monday",
	"Tuesday",
	"Wednesday",
	"Thursday",
	"Friday",
	"Saturday",
]

ClockValue = Union[str, time, timedelta]


def parse_clock(value: ClockValue) -> float:
	"""
	Convierte una hora de reloj a hora decimal (hour + minute/60).

	Args:
		value: "HH:MM:SS", "HH:MM", datetime.time, o timedelta desde
			medianoche (así devuelve Frappe los campos Time)

	Returns:
		float: hora decimal, ej. "09:30:00" -> 9.5
	"""
	if isinstance(value, timedelta):
		return value.total_seconds() / 3600
	if isinstance(value, time):
		return value.hour + value.minute / 60 + value.second / 3600
	if isinstance(value, str):
		parts = value.strip().split(":")
		if len(parts) not in (2, 3):
			raise ValueError(f"Invalid clock value: {value!r}")
		hour, minute = int(parts[0]), int(parts[1])
		second = float(parts[2]) if len(parts) == 3 else 0
		return hour + minute / 60 + second / 3600

	raise ValueError(f"Cannot convert {type(value)} to hour")


def format_clock(hour: float) -> str:
	"""Hora decimal a "HH:MM:SS", redondeando al minuto."""
	total_minutes = int(round(hour * 60))
	return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}:00"


def weekday_name(day: int) -> str:
	return WEEKDAY_NAMES[day]


def weekday_index(name: str) -> int:
	return WEEKDAY_NAMES.index(name)


def format_hour_label(hour: float) -> str:
	"""
	Etiqueta de fila para la grilla: 8 -> "8:00 AM", 13.5 -> "1:30 PM".
	"""
	total_minutes = int(round(hour * 60))
	hours, minutes = divmod(total_minutes, 60)
	period = "PM" if hours >= 12 else "AM"
	display_hour = hours - 12 if hours > 12 else (12 if hours == 0 else hours)
	return f"{display_hour}:{minutes:02d} {period}"


def _get(record: Any, key: str, default: Any = None) -> Any:
	if isinstance(record, dict):
		return record.get(key, default)
	return getattr(record, key, default)


def record_to_interval(record: Any) -> TimeInterval:
	"""
	Convierte un IntervalRecord (dict o row de Frappe) a TimeInterval.

	No valida límites; eso lo hace validate_interval antes del merge.
	"""
	record_id = _get(record, "name")

	return TimeInterval(
		owner=_get(record, "owner_id"),
		day=int(_get(record, "day_index")),
		status=coerce_status(_get(record, "status")),
		start=parse_clock(_get(record, "start_time")),
		end=parse_clock(_get(record, "end_time")),
		id=str(record_id) if record_id else new_interval_id(),
	)


def interval_to_record(interval: TimeInterval) -> Dict[str, Any]:
	return {
		"owner_id": interval.owner,
		"day_index": interval.day,
		"start_time": format_clock(interval.start),
		"end_time": format_clock(interval.end),
		"status": interval.status.value,
	}


def records_to_intervals(records: Iterable[Any]) -> List[TimeInterval]:
	return [record_to_interval(record) for record in records]


def intervals_to_records(intervals: Iterable[TimeInterval]) -> List[Dict[str, Any]]:
	return [interval_to_record(interval) for interval in intervals]


def split_by_owner(
	intervals: Iterable[TimeInterval],
	owner: str
) -> Tuple[List[TimeInterval], List[TimeInterval]]:
	"""Separa (mis intervalos, intervalos de los demás)."""
	mine: List[TimeInterval] = []
	others: List[TimeInterval] = []

	for interval in intervals:
		(mine if interval.owner == owner else others).append(interval)

	return mine, others


def interval_payload(interval: TimeInterval) -> Dict[str, Any]:
	"""Representación para la capa de render (API)."""
	payload = interval_to_record(interval)
	payload.update({
		"id": interval.id,
		"day": weekday_name(interval.day),
		"start": interval.start,
		"end": interval.end,
	})
	return payload


def combine(day: date, hour: float) -> datetime:
	"""Fecha + hora decimal -> datetime naive."""
	return datetime.combine(day, time()) + timedelta(minutes=round(hour * 60))
