"""HTTP clients for upstream providers."""
