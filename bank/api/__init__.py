"""HTTP API for the swap bank."""
