"""Delimited text ingestion.

This module tokenizes delimited text lines into typed cells and builds
or extends base tables from text resources.
"""
