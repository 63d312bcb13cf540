"""Shared helpers for the protozoa core."""
