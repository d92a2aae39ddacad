"""Domain modules for Chronicle."""
