"""Service layer: stats engine, auth, habit rules, charts and printable export."""
