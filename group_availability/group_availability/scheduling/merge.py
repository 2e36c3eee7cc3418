"""
Merge Engine

Coalesces one person's intervals into canonical form: per (day, status)
intervals are sorted, non-overlapping and non-adjacent.
"""

from itertools import groupby
from typing import Iterable, List

from .intervals import TimeInterval, validate_interval


def _partition_key(interval: TimeInterval):
	return (interval.owner, interval.day, interval.status.value)


def merge_intervals(intervals: Iterable[TimeInterval]) -> List[TimeInterval]:
	"""
	Une intervalos solapados o adyacentes del mismo día y estado.

	Args:
		intervals: intervalos de una persona (en cualquier orden)

	Returns:
		list: intervalos canónicos ordenados por (día, estado, inicio)

	Raises:
		InvalidRangeError: si algún intervalo tiene límites inválidos

	Algoritmo:
		1. Particionar por (owner, day, status)
		2. Ordenar cada partición por start
		3. Recorrer acumulando: si next.start <= running.end se une
		   (un toque exacto también une) con end = max(ends)
		4. Si no, cerrar el intervalo acumulado y abrir uno nuevo
	"""
	ordered = sorted(
		(validate_interval(interval) for interval in intervals),
		key=lambda i: (_partition_key(i), i.start, i.end),
	)

	merged: List[TimeInterval] = []

	for _, partition in groupby(ordered, key=_partition_key):
		running = None

		for current in partition:
			if running is None:
				running = current
				continue

			if current.start <= running.end:
				# Mantiene el id del primer intervalo de la corrida
				if current.end > running.end:
					running = running.with_bounds(running.start, current.end)
			else:
				merged.append(running)
				running = current

		if running is not None:
			merged.append(running)

	return merged


def is_canonical(intervals: List[TimeInterval]) -> bool:
	"""True si la lista ya está en forma canónica (sin solapes ni toques)."""
	ordered = sorted(intervals, key=lambda i: (_partition_key(i), i.start))

	for _, partition in groupby(ordered, key=_partition_key):
		previous = None
		for current in partition:
			if previous is not None and current.start <= previous.end:
				return False
			previous = current

	return True
