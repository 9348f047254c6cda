"""Clients for the external collaborators of an eligibility check."""

from .eligibility_api import EligibilityApiClient, EligibilityAnalysisProvider
from .geocoding import GeocodingProvider, MapboxGeocodingProvider

__all__ = [
    "EligibilityAnalysisProvider",
    "EligibilityApiClient",
    "GeocodingProvider",
    "MapboxGeocodingProvider",
]
