"""Live camera overlay."""
