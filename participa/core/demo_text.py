"""Localized placeholder text for seeds."""

import random
from typing import Callable, Dict, List

VOCABULARY = {
    "en": (
        "budget street park school library bike lane tree square market health "
        "housing water energy culture sport youth neighbourhood transport plan "
        "community garden lighting bench playground repair access public open"
    ).split(),
    "ca": (
        "pressupost carrer parc escola biblioteca carril bici arbre plaça mercat "
        "salut habitatge aigua energia cultura esport joventut barri transport pla "
        "comunitat hort enllumenat banc reparació accés públic obert"
    ).split(),
    "es": (
        "presupuesto calle parque escuela biblioteca carril bici árbol plaza mercado "
        "salud vivienda agua energía cultura deporte juventud barrio transporte plan "
        "comunidad huerto alumbrado banco reparación acceso público abierto"
    ).split(),
}


class LocalizedText:
    """Random words, sentences and paragraphs, one value per locale."""

    def __init__(self, locales: List[str], rng: random.Random = None):
        self.locales = locales or ["en"]
        self.rng = rng or random.Random()

    def _words(self, locale: str) -> List[str]:
        return VOCABULARY.get(locale, VOCABULARY["en"])

    def _sentence(self, locale: str, word_count: int) -> str:
        words = [self.rng.choice(self._words(locale)) for _ in range(word_count)]
        return " ".join(words).capitalize() + "."

    def word(self) -> Dict[str, str]:
        return {locale: self.rng.choice(self._words(locale)) for locale in self.locales}

    def sentence(self, word_count: int = 4) -> Dict[str, str]:
        return {locale: self._sentence(locale, word_count) for locale in self.locales}

    def paragraph(self, sentence_count: int = 3) -> Dict[str, str]:
        return {
            locale: " ".join(
                self._sentence(locale, self.rng.randint(4, 9)) for _ in range(sentence_count)
            )
            for locale in self.locales
        }

    def wrapped(self, before: str, after: str, fn: Callable[[], Dict[str, str]]) -> Dict[str, str]:
        """Wrap every localized value produced by fn (e.g. in <p>...</p>)."""
        return {locale: f"{before}{text}{after}" for locale, text in fn().items()}
