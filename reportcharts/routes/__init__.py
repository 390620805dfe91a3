"""API Routers."""

from . import charts
from . import reports

__all__ = ["charts", "reports"]
