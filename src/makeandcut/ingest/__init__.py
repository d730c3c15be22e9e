"""Binary ingest layer: multipart upload validation."""
