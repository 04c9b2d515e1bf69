"""Localized default names for components."""

from typing import Dict, List

COMPONENT_NAMES = {
    "accountability": {
        "en": "Accountability",
        "ca": "Seguiment",
        "es": "Seguimiento",
        "fr": "Suivi",
        "de": "Rechenschaft",
    },
}


class ComponentNamer:
    """Build the translated name of a component for every organization locale."""

    def __init__(self, available_locales: List[str], manifest_name: str):
        self.available_locales = available_locales or ["en"]
        self.manifest_name = manifest_name

    def i18n_name(self) -> Dict[str, str]:
        names = COMPONENT_NAMES.get(self.manifest_name, {})
        fallback = self.manifest_name.replace("_", " ").capitalize()
        return {locale: names.get(locale, fallback) for locale in self.available_locales}
