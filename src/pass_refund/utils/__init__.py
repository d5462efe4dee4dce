"""Shared helpers for refund calculation."""
