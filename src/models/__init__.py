"""Data models for claims, questions and leakage results."""
