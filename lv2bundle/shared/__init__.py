"""Shared models used across the pipeline stages."""
