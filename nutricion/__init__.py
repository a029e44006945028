"""Patient records and health metric tracking for nutrition practices."""

__version__ = "0.1.0"

__all__ = ["charts", "database", "forms", "metrics", "models", "users"]