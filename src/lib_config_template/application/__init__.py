"""Pure document merge and rendering policies."""
