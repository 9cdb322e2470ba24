"""Core resolution engine."""
