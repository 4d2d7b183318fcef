"""trustset: JPEG Trust indicator sets from C2PA-signed images."""

__version__ = "1.0.0"
