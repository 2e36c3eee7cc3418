"""
Tests for scheduling/interaction.py

Tests drag-select, edge resize, exact-time entry and the editing guards.
"""

import random
import unittest

from group_availability.group_availability.scheduling.conflict import find_conflicts
from group_availability.group_availability.scheduling.interaction import (
	AvailabilityEditor,
	DragMode,
	Edge,
	EditorState,
	pixel_to_hour,
	validate_exact_entry,
)
from group_availability.group_availability.scheduling.intervals import (
	ConflictError,
	EntryValidationError,
	Status,
	TimeInterval,
)
from group_availability.group_availability.scheduling.merge import is_canonical

# 14 horas en 560 px -> 40 px por hora
GRID_HEIGHT = 560


def y_for(hour):
	return (hour - 8.0) * 40


def iv(day, start, end, status=Status.AVAILABLE, owner="ana", **kwargs):
	return TimeInterval(owner, day, status, start, end, **kwargs)


def drag(editor, day, anchor, current):
	editor.pointer_down_cell(day, anchor)
	editor.pointer_move_cell(day, current)
	return editor.pointer_up()


class TestPixelToHour(unittest.TestCase):
	"""Tests for the pixel mapping."""

	def test_linear_mapping(self):
		self.assertEqual(pixel_to_hour(0, GRID_HEIGHT), 8.0)
		self.assertEqual(pixel_to_hour(280, GRID_HEIGHT), 15.0)
		self.assertEqual(pixel_to_hour(GRID_HEIGHT, GRID_HEIGHT), 22.0)

	def test_snaps_to_quarter_hour(self):
		self.assertEqual(pixel_to_hour(47, GRID_HEIGHT), 9.25)

	def test_clamped(self):
		self.assertEqual(pixel_to_hour(-30, GRID_HEIGHT), 8.0)
		self.assertEqual(pixel_to_hour(900, GRID_HEIGHT), 22.0)

	def test_invalid_height(self):
		with self.assertRaises(ValueError):
			pixel_to_hour(10, 0)


class TestDragSelect(unittest.TestCase):
	"""Tests for drag gestures on cells."""

	def setUp(self):
		self.editor = AvailabilityEditor("ana", [iv(1, 9.0, 11.0)])

	def test_drag_add_merges(self):
		"""Mon 9-11 + drag Mon 10-12 -> Mon 9-12."""
		session = self.editor.pointer_down_cell(1, 11)
		self.assertIs(session.mode, DragMode.ADD)

		self.editor.pointer_move_cell(1, 10)
		result = self.editor.pointer_up()

		self.assertEqual(result, [iv(1, 9.0, 12.0)])
		self.assertIs(self.editor.state, EditorState.IDLE)

	def test_drag_add_conflict_is_noop(self):
		"""Mon 9-11 libre + drag Mon 10-12 ocupado -> Conflict, sin cambios."""
		before = list(self.editor.intervals)
		self.editor.toggle_creation_status()

		with self.assertRaises(ConflictError):
			drag(self.editor, 1, 11, 10)

		self.assertEqual(self.editor.intervals, before)
		self.assertIs(self.editor.state, EditorState.IDLE)

	def test_drag_creates_busy_interval(self):
		self.assertIs(self.editor.toggle_creation_status(), Status.BUSY)

		drag(self.editor, 1, 13, 14)

		self.assertIn(iv(1, 13.0, 15.0, Status.BUSY), self.editor.intervals)

	def test_drag_add_replaces_enclosed_intervals(self):
		editor = AvailabilityEditor("ana", [iv(2, 10.0, 11.0), iv(2, 12.0, 13.0)])

		drag(editor, 2, 9, 13)

		self.assertEqual(editor.intervals, [iv(2, 9.0, 14.0)])

	def test_drag_remove_deletes_whole_intervals(self):
		editor = AvailabilityEditor("ana", [
			iv(1, 9.0, 11.0),
			iv(1, 13.0, 15.0, Status.BUSY),
			iv(1, 17.0, 18.0),
		])

		session = editor.pointer_down_cell(1, 10)
		self.assertIs(session.mode, DragMode.REMOVE)
		editor.pointer_move_cell(1, 13)
		result = editor.pointer_up()

		self.assertEqual(result, [iv(1, 17.0, 18.0)])

	def test_move_to_other_day_is_ignored(self):
		self.editor.pointer_down_cell(1, 14)
		self.editor.pointer_move_cell(2, 16)

		self.assertEqual(self.editor.drag.current_hour, 14)
		self.assertTrue(self.editor.is_in_drag_selection(1, 14))
		self.assertFalse(self.editor.is_in_drag_selection(2, 14))

		self.editor.pointer_up()
		self.assertIn(iv(1, 14.0, 15.0), self.editor.intervals)

	def test_editing_blocked_when_others_visible(self):
		self.editor.set_visibility(self.editor.visibility.toggle("ben"))

		self.assertIsNone(self.editor.pointer_down_cell(1, 14))
		self.assertIs(self.editor.state, EditorState.IDLE)
		self.assertEqual(self.editor.pointer_up(), [iv(1, 9.0, 11.0)])

	def test_pointer_leave_commits(self):
		self.editor.pointer_down_cell(1, 15)
		self.editor.pointer_leave()

		self.assertIn(iv(1, 15.0, 16.0), self.editor.intervals)

	def test_cancel_discards(self):
		self.editor.pointer_down_cell(1, 15)
		self.editor.cancel()

		self.assertEqual(self.editor.pointer_up(), [iv(1, 9.0, 11.0)])

	def test_other_owners_are_dropped(self):
		editor = AvailabilityEditor("ana", [iv(1, 9.0, 11.0), iv(1, 9.0, 11.0, owner="ben")])
		self.assertEqual(len(editor.intervals), 1)


class TestResize(unittest.TestCase):
	"""Tests for edge resize gestures."""

	def setUp(self):
		self.editor = AvailabilityEditor("ana", [
			iv(1, 9.0, 11.0, id="free"),
			iv(1, 12.0, 13.0, Status.BUSY, id="busy"),
		])

	def test_resize_end(self):
		self.editor.pointer_down_edge("free", Edge.END)
		self.assertIs(self.editor.state, EditorState.RESIZING)

		moved = self.editor.pointer_move_edge(y_for(11.75), GRID_HEIGHT)
		self.assertEqual((moved.start, moved.end), (9.0, 11.75))

		self.editor.pointer_up()
		self.assertIs(self.editor.state, EditorState.IDLE)
		self.assertIn(iv(1, 9.0, 11.75), self.editor.intervals)

	def test_resize_freezes_before_conflict(self):
		"""El borde queda en la última posición válida."""
		self.editor.pointer_down_edge("free", Edge.END)
		self.editor.pointer_move_edge(y_for(11.75), GRID_HEIGHT)

		moved = self.editor.pointer_move_edge(y_for(12.5), GRID_HEIGHT)
		self.assertEqual(moved.end, 11.75)

		self.editor.pointer_up()
		self.assertFalse(find_conflicts(self.editor.intervals))

	def test_resize_keeps_minimum_span(self):
		self.editor.pointer_down_edge("free", Edge.START)
		moved = self.editor.pointer_move_edge(y_for(11.5), GRID_HEIGHT)

		self.assertEqual((moved.start, moved.end), (10.75, 11.0))

	def test_resize_commit_merges(self):
		editor = AvailabilityEditor("ana", [iv(1, 9.0, 10.0, id="a"), iv(1, 11.0, 12.0, id="b")])

		editor.pointer_down_edge("a", Edge.END)
		editor.pointer_move_edge(y_for(11.5), GRID_HEIGHT)
		result = editor.pointer_up()

		self.assertEqual(result, [iv(1, 9.0, 12.0)])

	def test_resize_suppresses_drag(self):
		self.editor.pointer_down_edge("free", Edge.END)
		self.assertIsNone(self.editor.pointer_down_cell(1, 15))

	def test_resize_unknown_interval(self):
		self.assertIsNone(self.editor.pointer_down_edge("nope", Edge.END))

	def test_resize_blocked_when_others_visible(self):
		self.editor.set_visibility(self.editor.visibility.toggle("ben"))
		self.assertIsNone(self.editor.pointer_down_edge("free", Edge.END))

	def test_cancel_restores_interval(self):
		self.editor.pointer_down_edge("free", Edge.END)
		self.editor.pointer_move_edge(y_for(11.75), GRID_HEIGHT)
		self.editor.cancel()

		self.assertEqual(self.editor.find("free").end, 11.0)
		self.assertIs(self.editor.state, EditorState.IDLE)


class TestExactEntry(unittest.TestCase):
	"""Tests for exact-time entry."""

	def setUp(self):
		self.editor = AvailabilityEditor("ana", [iv(1, 9.0, 11.0)])

	def test_add_exact_interval(self):
		result = self.editor.add_exact_interval(2, 9, 30, 10, 45)
		self.assertIn(iv(2, 9.5, 10.75), result)

	def test_add_exact_interval_merges(self):
		result = self.editor.add_exact_interval(1, "10", "30", "12", "00")
		self.assertEqual(result, [iv(1, 9.0, 12.0)])

	def test_missing_field(self):
		with self.assertRaises(EntryValidationError) as ctx:
			self.editor.add_exact_interval(2, 9, None, 10, 0)

		self.assertIn("Start minute is required", ctx.exception.errors)
		self.assertEqual(self.editor.intervals, [iv(1, 9.0, 11.0)])

	def test_validation_messages(self):
		self.assertEqual(validate_exact_entry(1, 10, 0, 9, 0), ["End time must be after start time"])
		self.assertEqual(validate_exact_entry(1, 7, 0, 9, 0), ["Times must be between 8:00 AM and 10:00 PM"])
		self.assertEqual(validate_exact_entry(1, 9, 75, 10, 0), ["Start minute must be between 0 and 59"])
		self.assertEqual(validate_exact_entry(1, "nine", 0, 10, 0), ["Start hour must be a whole number"])
		self.assertEqual(validate_exact_entry(9, 9, 0, 10, 0), ["Day must be between 0 (Sunday) and 6 (Saturday)"])
		self.assertEqual(validate_exact_entry(1, 21, 0, 22, 0), [])

	def test_minutes_on_quarter_hour(self):
		self.assertEqual(validate_exact_entry(1, 9, 10, 10, 0), ["Start minute must be 0, 15, 30 or 45"])
		self.assertEqual(
			validate_exact_entry(1, 9, 10, 10, 7),
			["Start minute must be 0, 15, 30 or 45", "End minute must be 0, 15, 30 or 45"]
		)
		self.assertEqual(validate_exact_entry(1, 9, 45, 10, 15), [])

	def test_off_grid_entry_is_rejected(self):
		with self.assertRaises(EntryValidationError):
			self.editor.add_exact_interval(1, 9, 10, 10, 7)

		self.assertEqual(self.editor.intervals, [iv(1, 9.0, 11.0)])

	def test_conflict(self):
		with self.assertRaises(ConflictError):
			self.editor.add_exact_interval(1, 10, 0, 12, 0, Status.BUSY)

		self.assertEqual(self.editor.intervals, [iv(1, 9.0, 11.0)])


class TestRemoveInterval(unittest.TestCase):
	"""Tests for removing a single block by click."""

	def setUp(self):
		self.editor = AvailabilityEditor("ana", [
			iv(1, 9.0, 11.0, id="morning"),
			iv(1, 14.0, 16.0, id="afternoon"),
			iv(2, 9.0, 10.0, Status.BUSY, id="busy"),
		])

	def test_removes_only_that_block(self):
		result = self.editor.remove_interval("morning")

		self.assertEqual(result, [iv(1, 14.0, 16.0), iv(2, 9.0, 10.0, Status.BUSY)])
		self.assertIsNone(self.editor.find("morning"))

	def test_unknown_id_is_noop(self):
		before = list(self.editor.intervals)
		self.assertEqual(self.editor.remove_interval("nope"), before)

	def test_blocked_when_others_visible(self):
		self.editor.set_visibility(self.editor.visibility.toggle("ben"))

		self.editor.remove_interval("morning")

		self.assertIsNotNone(self.editor.find("morning"))
		self.assertEqual(len(self.editor.intervals), 3)

	def test_blocked_during_resize(self):
		self.editor.pointer_down_edge("afternoon", Edge.END)

		self.editor.remove_interval("morning")

		self.assertIsNotNone(self.editor.find("morning"))
		self.assertIs(self.editor.state, EditorState.RESIZING)


class TestEditSequences(unittest.TestCase):
	"""Random sequences of checked edits keep the set consistent."""

	def test_mutual_exclusion_preserved(self):
		rng = random.Random(7)
		editor = AvailabilityEditor("ana")

		for _ in range(300):
			if rng.random() < 0.3:
				editor.toggle_creation_status()

			if editor.intervals and rng.random() < 0.4:
				target = rng.choice(editor.intervals)
				editor.pointer_down_edge(target.id, rng.choice([Edge.START, Edge.END]))
				for _ in range(rng.randint(1, 4)):
					editor.pointer_move_edge(rng.uniform(0, GRID_HEIGHT), GRID_HEIGHT)
				editor.pointer_up()
			else:
				day = rng.randint(0, 6)
				try:
					drag(editor, day, rng.randint(8, 21), rng.randint(8, 21))
				except ConflictError:
					pass

			self.assertFalse(find_conflicts(editor.intervals))
			self.assertTrue(is_canonical(editor.intervals))
			self.assertIs(editor.state, EditorState.IDLE)


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
