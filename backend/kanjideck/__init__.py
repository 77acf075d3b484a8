"""Kanjideck - WaniKani review session backend."""

__version__ = "0.1.0"
