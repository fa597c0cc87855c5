"""HTTP API for Kracker Core."""
