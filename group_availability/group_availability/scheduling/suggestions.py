"""
Meeting Suggestion Service

Scans the week on the quarter-hour grid and ranks contiguous windows where a
constant number of members (at or above the group's threshold) are available.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

import pytz

from .intervals import DAY_END, DAY_START, GRANULARITY, WEEKDAYS, TimeInterval
from .overlap import overlap_count
from .records import combine


SAMPLES_PER_DAY = int((DAY_END - DAY_START) / GRANULARITY)


@dataclass(frozen=True)
class MeetingSuggestion:
	day: int
	start: float
	end: float
	attendance: int

	@property
	def duration(self) -> float:
		return self.end - self.start


def attendance_threshold(group_size: int) -> int:
	"""max(2, floor(group_size * 0.5))"""
	return max(2, int(group_size * 0.5))


def _day_segments(
	day: int,
	intervals: List[TimeInterval],
	threshold: int
) -> List[MeetingSuggestion]:
	"""
	Segmentación greedy de un día en corridas de asistencia constante.

	Algoritmo:
		1. Muestrear hour = DAY_START + k * GRANULARITY (56 muestras)
		2. Si la asistencia cumple el umbral y no hay segmento abierto (o el
		   abierto tiene la misma asistencia), abrir/extender
		3. Si cambia la asistencia pero sigue sobre el umbral, cerrar y abrir
		   uno nuevo en esta muestra
		4. Si cae bajo el umbral, cerrar el segmento abierto
		5. Al final del día cerrar en DAY_END
	"""
	segments: List[MeetingSuggestion] = []
	open_start: Optional[float] = None
	open_attendance = 0

	for k in range(SAMPLES_PER_DAY):
		hour = DAY_START + k * GRANULARITY
		attendance = overlap_count(day, hour, intervals)

		if attendance >= threshold:
			if open_start is None:
				open_start, open_attendance = hour, attendance
			elif attendance != open_attendance:
				segments.append(MeetingSuggestion(day, open_start, hour, open_attendance))
				open_start, open_attendance = hour, attendance
		elif open_start is not None:
			segments.append(MeetingSuggestion(day, open_start, hour, open_attendance))
			open_start = None

	if open_start is not None:
		segments.append(MeetingSuggestion(day, open_start, DAY_END, open_attendance))

	return segments


def suggest_meeting_times(
	intervals: Iterable[TimeInterval],
	group_size: int,
	top_n: int = 3
) -> List[MeetingSuggestion]:
	"""
	Sugiere los mejores horarios de reunión de la semana.

	Args:
		intervals: intervalos de todos los miembros considerados
		group_size: tamaño del grupo (define el umbral de asistencia)
		top_n: cantidad de sugerencias a retornar

	Returns:
		list[MeetingSuggestion]: ordenadas por asistencia desc, luego
		duración desc; los empates restantes conservan el orden de
		descubrimiento (día, luego hora)
	"""
	if top_n <= 0:
		return []

	intervals = list(intervals)
	threshold = attendance_threshold(group_size)

	segments: List[MeetingSuggestion] = []
	for day in WEEKDAYS:
		segments.extend(_day_segments(day, intervals, threshold))

	# sorted es estable: los empates quedan en orden (día, hora)
	segments = sorted(segments, key=lambda s: (-s.attendance, -s.duration))

	return segments[:top_n]


def next_occurrence(
	suggestion: MeetingSuggestion,
	timezone: str,
	now: Optional[datetime] = None
) -> Dict[str, datetime]:
	"""
	Próxima ocurrencia concreta de una sugerencia semanal.

	Args:
		suggestion: sugerencia (día de semana, Sunday = 0)
		timezone: nombre de zona horaria del grupo (pytz)
		now: instante de referencia (aware); por defecto ahora en UTC

	Returns:
		dict: {"start": datetime, "end": datetime} localizados en timezone
	"""
	tz = pytz.timezone(timezone)
	now = now or datetime.now(pytz.UTC)
	local_now = now.astimezone(tz)

	# Python: Monday = 0; aquí Sunday = 0
	today_index = (local_now.weekday() + 1) % 7
	days_ahead = (suggestion.day - today_index) % 7
	target: date = local_now.date() + timedelta(days=days_ahead)

	start = tz.localize(combine(target, suggestion.start))
	if start <= local_now:
		target += timedelta(days=7)
		start = tz.localize(combine(target, suggestion.start))

	end = tz.localize(combine(target, suggestion.end))

	return {"start": start, "end": end}
