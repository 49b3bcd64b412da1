"""Application layer – query compilation and the object store port."""
