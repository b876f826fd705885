"""Adapters for the research gateway, HTTP resilience and persistence."""
