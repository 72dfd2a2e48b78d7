"""Tool table and definitions."""
