"""Upstream data sources: abstract ports and their HTTP implementations."""
