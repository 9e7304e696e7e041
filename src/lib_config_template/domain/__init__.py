"""Document primitives, typed accessor, and error taxonomy."""
