"""In-process analysis modules for mapcov."""
