"""Version information for mapcov."""

__version__ = "0.4.0"
__license__ = "GPL-2.0"
__description__ = "Read mapping, duplicate removal, redundancy and coverage analysis pipeline"
