"""Request validation service with an append-only audit trail of failed fields."""
