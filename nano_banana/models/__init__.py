"""Image model metadata."""
