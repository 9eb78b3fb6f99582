"""
Helper utilities for link parsing, path mapping and formatting.
"""
