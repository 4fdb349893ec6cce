"""Configuration models and column rules."""
