"""Per-theme style strategies and the inference boundary."""
