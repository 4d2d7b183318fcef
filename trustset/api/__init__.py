"""trustset API package.

Optional FastAPI service layer around the indicator-set pipeline.
"""

from .server import create_app  # noqa: F401
