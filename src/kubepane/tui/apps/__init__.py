"""TUI applications."""
