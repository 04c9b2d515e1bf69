"""Tests for demo text generation and component naming."""

import random

from participa.core.demo_text import LocalizedText, VOCABULARY
from participa.core.namer import ComponentNamer
from participa.db import translated


class TestLocalizedText:
    """Test localized placeholder text."""

    def test_word_per_locale(self):
        word = LocalizedText(["en", "ca"], random.Random(1)).word()

        assert set(word) == {"en", "ca"}
        assert word["en"] in VOCABULARY["en"]
        assert word["ca"] in VOCABULARY["ca"]

    def test_sentence(self):
        sentence = LocalizedText(["en"], random.Random(1)).sentence(word_count=5)["en"]

        assert sentence.endswith(".")
        assert sentence[0].isupper()
        assert len(sentence.rstrip(".").split()) == 5

    def test_paragraph(self):
        paragraph = LocalizedText(["es"], random.Random(1)).paragraph(sentence_count=3)["es"]
        assert paragraph.count(".") == 3

    def test_unknown_locale_falls_back_to_english(self):
        word = LocalizedText(["fi"], random.Random(1)).word()
        assert word["fi"] in VOCABULARY["en"]

    def test_wrapped(self):
        text = LocalizedText(["en", "ca"], random.Random(1))
        wrapped = text.wrapped("<p>", "</p>", text.sentence)

        for value in wrapped.values():
            assert value.startswith("<p>")
            assert value.endswith(".</p>")

    def test_reproducible(self):
        first = LocalizedText(["en"], random.Random(99)).paragraph()
        second = LocalizedText(["en"], random.Random(99)).paragraph()
        assert first == second


class TestComponentNamer:
    """Test translated component names."""

    def test_known_locales(self):
        names = ComponentNamer(["en", "ca", "es"], "accountability").i18n_name()
        assert names == {"en": "Accountability", "ca": "Seguiment", "es": "Seguimiento"}

    def test_unknown_locale(self):
        assert ComponentNamer(["fi"], "accountability").i18n_name() == {"fi": "Accountability"}

    def test_unknown_manifest(self):
        assert ComponentNamer(["en"], "budget_lines").i18n_name() == {"en": "Budget lines"}


class TestTranslated:
    """Test picking a value out of a translated field."""

    def test_requested_locale(self):
        assert translated({"en": "Park", "ca": "Parc"}, "ca") == "Parc"

    def test_falls_back_to_default_locale(self):
        assert translated({"en": "Park", "ca": ""}, "ca") == "Park"
        assert translated({"ca": "Parc"}, "es", default_locale="ca") == "Parc"

    def test_any_value_as_last_resort(self):
        assert translated({"es": "", "fr": "Parc"}, "de") == "Parc"

    def test_empty_and_plain_values(self):
        assert translated(None) == ""
        assert translated("Park") == "Park"
