"""Core session, scoring and result logic."""
