from .reading import ProgressReading, format_percentage

__all__ = ["ProgressReading", "format_percentage"]
