"""Headless driver that steers the snake engine through its public operations."""
