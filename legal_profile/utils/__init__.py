"""Utility modules for the legal profile package."""
