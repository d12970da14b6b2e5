"""Themed lighting and atmosphere descriptions."""
