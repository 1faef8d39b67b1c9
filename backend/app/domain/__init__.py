"""Pure domain rules with no database or HTTP dependencies."""
