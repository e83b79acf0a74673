"""Human-readable table rendering.

This module turns header names and formatted cell text into aligned,
column-padded text tables.
"""
