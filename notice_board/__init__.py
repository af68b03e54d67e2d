"""Notice board ("mural de avisos") REST service."""

__version__ = "1.0.0"
