"""Read-only JSON API over the query catalog."""
