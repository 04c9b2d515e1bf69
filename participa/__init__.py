"""Participa: participatory-democracy platform components."""

__version__ = "1.0.0"
