"""Runtime helpers (logging setup, settings loading)."""

__all__: list[str] = []
