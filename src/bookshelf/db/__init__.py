"""Database engine, sessions, and ORM models."""
