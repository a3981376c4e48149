# modules/careers/__init__.py
from flask import Blueprint

bp = Blueprint(
    "careers",
    __name__,
    url_prefix="/careers"
)

from . import routes  # noqa: E402,F401
