"""
jsonexpand: decode JSON text carried in event fields and merge or split it.

A single pipeline stage for event-processing pipelines, plus the small
engine, event model and CLI needed to run it over JSON Lines streams.
"""

__version__ = "0.1.0"
