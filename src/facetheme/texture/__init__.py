"""Procedural texture synthesis."""
