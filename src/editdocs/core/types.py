"""Core type definitions."""

from typing import NewType

# Request path as seen in the URL (e.g., "/guide/index.html")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)
