"""Pulse: live classroom emotion feedback."""
