"""Core configuration, persistence and error types for Sisyflow."""
