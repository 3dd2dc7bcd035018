"""Infrastructure helpers: logging, telemetry and error envelopes."""
