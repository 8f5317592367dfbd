"""Process-wide session state: credential and last produced image."""
