"""mapcov: read mapping, redundancy and coverage analysis pipeline."""

from mapcov.__version__ import __version__

__all__ = ["__version__"]
