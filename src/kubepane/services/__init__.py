"""Service layer wrapping external systems."""
