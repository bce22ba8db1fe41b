"""Configuration models, YAML document loading, and session settings."""
