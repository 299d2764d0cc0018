"""Pipeline configuration loading and typed settings."""
