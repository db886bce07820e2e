"""Aggregation queries and the query catalog."""
