"""Domain layer for financy application."""
