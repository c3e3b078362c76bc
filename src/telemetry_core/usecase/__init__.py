"""Monitoring use cases."""
