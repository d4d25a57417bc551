"""Result service: browse and export captured task results."""

__version__ = "0.1.0"
