"""HTTP API for the sewer condition engine."""
