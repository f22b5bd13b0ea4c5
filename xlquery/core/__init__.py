"""Core query pipeline: directive parsing, store access, rendering and export."""

__all__ = []
