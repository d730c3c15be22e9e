"""Remote store adapters."""
