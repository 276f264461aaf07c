"""Utility helpers for mapcov."""
