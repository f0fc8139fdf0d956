"""Package data: built-in configuration defaults."""
