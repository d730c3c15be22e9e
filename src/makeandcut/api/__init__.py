"""HTTP error mapping."""
