"""Chatti realtime presence and message fan-out service."""
__version__ = "1.0.0"
