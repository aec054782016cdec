"""Utility helpers for pbs_editor."""
