"""Request models and error types."""
