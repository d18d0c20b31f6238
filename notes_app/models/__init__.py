"""SQLAlchemy ORM models."""
