"""Utilities: event log, logging setup, replay recording."""
