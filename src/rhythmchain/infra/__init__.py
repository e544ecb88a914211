"""Infrastructure: persistence and cache implementations."""
