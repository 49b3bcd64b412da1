"""Testing – in-memory doubles for the object service ports."""
