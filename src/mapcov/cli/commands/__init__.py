"""Auxiliary mapcov subcommands."""
