"""
Tests for scheduling/merge.py

Tests canonical merging of one person's intervals.
"""

import random
import unittest

from group_availability.group_availability.scheduling.intervals import (
	InvalidRangeError,
	Status,
	TimeInterval,
)
from group_availability.group_availability.scheduling.merge import is_canonical, merge_intervals


def iv(day, start, end, status=Status.AVAILABLE, owner="ana", **kwargs):
	return TimeInterval(owner, day, status, start, end, **kwargs)


class TestMerge(unittest.TestCase):
	"""Tests for merge_intervals."""

	def test_empty(self):
		self.assertEqual(merge_intervals([]), [])

	def test_overlapping_intervals_merge(self):
		"""Mon 9-11 + Mon 10-12 -> Mon 9-12."""
		result = merge_intervals([iv(1, 9.0, 11.0), iv(1, 10.0, 12.0)])
		self.assertEqual(result, [iv(1, 9.0, 12.0)])

	def test_touching_intervals_merge(self):
		result = merge_intervals([iv(1, 10.0, 11.0), iv(1, 9.0, 10.0)])
		self.assertEqual(result, [iv(1, 9.0, 11.0)])

	def test_contained_interval_is_absorbed(self):
		result = merge_intervals([iv(1, 9.0, 15.0), iv(1, 10.0, 11.0)])
		self.assertEqual(result, [iv(1, 9.0, 15.0)])

	def test_gap_keeps_intervals_apart(self):
		result = merge_intervals([iv(1, 9.0, 10.0), iv(1, 10.25, 11.0)])
		self.assertEqual(len(result), 2)

	def test_statuses_and_days_are_separate(self):
		result = merge_intervals([
			iv(1, 9.0, 10.0),
			iv(1, 10.0, 11.0, Status.BUSY),
			iv(2, 10.0, 11.0),
		])
		self.assertEqual(len(result), 3)

	def test_output_order(self):
		result = merge_intervals([
			iv(2, 9.0, 10.0),
			iv(1, 15.0, 16.0, Status.BUSY),
			iv(1, 12.0, 13.0),
			iv(1, 9.0, 10.0),
		])
		self.assertEqual(
			[(i.day, i.status, i.start) for i in result],
			[
				(1, Status.AVAILABLE, 9.0),
				(1, Status.AVAILABLE, 12.0),
				(1, Status.BUSY, 15.0),
				(2, Status.AVAILABLE, 9.0),
			],
		)

	def test_keeps_id_of_earliest_interval(self):
		result = merge_intervals([iv(1, 10.0, 12.0, id="late"), iv(1, 9.0, 11.0, id="early")])
		self.assertEqual(result[0].id, "early")

	def test_invalid_interval_is_rejected(self):
		with self.assertRaises(InvalidRangeError):
			merge_intervals([iv(1, 11.0, 9.0)])

	def test_idempotent_and_canonical(self):
		"""merge(merge(S)) == merge(S) y sin solapes ni toques."""
		rng = random.Random(42)

		for _ in range(50):
			intervals = []
			for _ in range(rng.randint(0, 12)):
				start = 8.0 + rng.randint(0, 52) * 0.25
				end = min(22.0, start + rng.randint(1, 16) * 0.25)
				status = rng.choice([Status.AVAILABLE, Status.BUSY])
				intervals.append(iv(rng.randint(0, 6), start, end, status))

			merged = merge_intervals(intervals)
			self.assertEqual(merge_intervals(merged), merged)
			self.assertTrue(is_canonical(merged))

	def test_is_canonical_detects_touching(self):
		self.assertFalse(is_canonical([iv(1, 9.0, 10.0), iv(1, 10.0, 11.0)]))
		self.assertTrue(is_canonical([iv(1, 9.0, 10.0), iv(1, 10.0, 11.0, Status.BUSY)]))


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
