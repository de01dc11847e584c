"""Stack construction and search algorithms."""
