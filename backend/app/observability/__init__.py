"""Lightweight logging-backed metrics and tracing."""
