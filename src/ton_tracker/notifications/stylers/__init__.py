"""Notification stylers."""
