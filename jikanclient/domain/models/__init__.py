"""Value objects and decoded resource shapes."""
