"""Process executor implementations."""
