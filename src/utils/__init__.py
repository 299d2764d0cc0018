"""LLM client and error handling utilities."""
