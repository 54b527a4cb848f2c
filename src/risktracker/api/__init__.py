"""HTTP surface over the session repository."""
