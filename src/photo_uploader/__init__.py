"""Photo upload utility: selection, previews and a relay to object storage."""

__version__ = "0.1.0"
