"""Core building blocks shared across the reporting engine."""
