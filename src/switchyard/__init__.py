"""switchyard: resilient multi-provider request routing."""

__version__ = "0.1.0"
