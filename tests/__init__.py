"""Tests for the Habit Hero integration."""
