"""Log-safety helpers."""
