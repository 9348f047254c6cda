from __future__ import annotations


class EligibilityError(RuntimeError):
    """Base class for caller-side eligibility check failures.

    These are the failures the workflow converts into a FAILED status plus a
    user-facing message. The pure interpretation layer never raises them.
    """


class ConfigurationError(EligibilityError):
    pass


class BoundaryGeometryError(EligibilityError, ValueError):
    pass


class AreaLimitExceededError(EligibilityError):
    def __init__(self, message: str, *, area_ha: float, limit_ha: float) -> None:
        super().__init__(message)
        self.area_ha = area_ha
        self.limit_ha = limit_ha


class CountryNotResolvedError(EligibilityError):
    pass


class GeocodingError(EligibilityError):
    pass


class EligibilityApiError(EligibilityError):
    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class CheckInProgressError(EligibilityError):
    pass
