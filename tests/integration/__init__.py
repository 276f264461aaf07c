"""Integration tests for mapcov."""
