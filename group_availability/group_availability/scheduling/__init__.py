"""
Scheduling Services Module

This module provides the availability interval engine:
- Interval model and validation (intervals.py)
- Canonical merge (merge.py)
- Opposite-status conflict detection (conflict.py)
- Group overlap and visibility (overlap.py)
- Meeting time suggestions (suggestions.py)
- Pointer interaction state machine (interaction.py)
- Record conversion (records.py)
- Frappe-backed persistence (persistence.py)
"""
