"""Pure domain logic with no database or network access."""
