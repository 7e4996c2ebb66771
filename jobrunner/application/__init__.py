"""Application layer: service orchestrators used by collaborators."""
