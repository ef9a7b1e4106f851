"""Record encoders: logfmt-style text and NDJSON."""
