"""Application modules grouped by concern."""
