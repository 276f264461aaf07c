"""Step executors used by :class:`mapcov.core.pipeline.Pipeline`."""
