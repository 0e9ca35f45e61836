"""Runtime adapters and FastAPI dependency wiring."""
