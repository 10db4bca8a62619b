"""Application services (use cases). Framework-agnostic; no Flask imports."""
