"""Lightweight structural inspection of PHP sources."""
