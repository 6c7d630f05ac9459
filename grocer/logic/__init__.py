"""Core business logic layer.

Subpackages:
- units: unit families and quantity conversion
- shopping: generating, merging, categorizing and formatting shopping lists
- parsing: free-text recipe and ingredient parsing
- planning: weekly meal selection and day assignment
"""
__all__ = ["units", "shopping", "parsing", "planning"]
