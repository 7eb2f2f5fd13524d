"""Score storage in PostgreSQL."""
