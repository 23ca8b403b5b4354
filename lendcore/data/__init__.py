"""Market data providers, protocol constants and reference token collaborators."""
