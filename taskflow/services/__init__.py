"""Persistence, task store and derived views."""
