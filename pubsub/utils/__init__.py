"""Shared helpers for the pubsub package."""
