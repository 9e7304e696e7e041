"""Adapters wrapping external document parsers."""
