"""Domain entities, pure aggregation logic and the dashboard service."""
