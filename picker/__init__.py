"""Picker package: localized fuzzy suggestions for typeahead pickers.

This package normalizes and collates Hebrew/Latin names, scores queries
against candidate lists, tracks recent selections per picker and
debounces keystroke-driven re-ranking.
"""
