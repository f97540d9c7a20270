"""Structured logging: levels, context, formatters and bootstrap."""
