"""Maintenance scripts for Table Engine."""
