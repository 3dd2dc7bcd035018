"""Engine services: record access, analytics, rules and aggregation."""
