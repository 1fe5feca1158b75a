"""Spaced Review: SM-2 review scheduling for self-study modules."""
