"""Voice desk back office package."""
