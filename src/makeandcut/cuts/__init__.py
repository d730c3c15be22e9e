"""Time-range cuts: URL composition, aggregation and routes."""
