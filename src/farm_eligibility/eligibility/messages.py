from __future__ import annotations

from typing import Any

from .formatting import DEFAULT_LOCALE, language_for

CATALOGS: dict[str, dict[str, str]] = {
    "en": {
        "analysis_pending": "Analysis pending.",
        "eligibility_success": "Your farm has {area} eligible!",
        "eligibility_failure": "Your farm has no eligible area according to the analysis.",
        "deforestation_reason": "Most likely cause: {area} of deforestation detected.",
        "wetlands_reason": "Most likely cause: high proportion of wetlands ({area}).",
        "low_forest_reason": "Most likely cause: low forest cover ({area}).",
        "analysis_incomplete": "Analysis incomplete due to missing area data.",
    },
    "es": {
        "analysis_pending": "Análisis pendiente.",
        "eligibility_success": "¡Su establecimiento tiene {area} elegibles!",
        "eligibility_failure": "Su establecimiento no tiene área elegible según el análisis.",
        "deforestation_reason": "Causa principal probable: {area} de deforestación detectada.",
        "wetlands_reason": "Causa principal probable: Alta proporción de humedales ({area}).",
        "low_forest_reason": "Causa principal probable: Baja cobertura forestal ({area}).",
        "analysis_incomplete": "Análisis incompleto por falta de datos de área.",
    },
}


class Translator:
    """Look up user-facing messages for one locale.

    Missing keys in a non-English catalog fall back to English.
    """

    def __init__(self, locale: str | None = None) -> None:
        self.locale = locale or DEFAULT_LOCALE
        self._catalog = CATALOGS[language_for(self.locale)]

    def __call__(self, key: str, **params: Any) -> str:
        template = self._catalog.get(key) or CATALOGS["en"][key]
        return template.format(**params)
