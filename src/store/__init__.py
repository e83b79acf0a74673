"""Table storage and view layer.

This module owns base table storage, the string arena, immutable views,
the row resolver, and grouping over views.
"""
