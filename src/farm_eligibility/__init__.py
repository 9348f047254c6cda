"""Regenerative-program eligibility checks for farm boundaries."""

from .eligibility import interpret_eligibility, resolve_category_area

__version__ = "0.1.0"

__all__ = ["interpret_eligibility", "resolve_category_area", "__version__"]
