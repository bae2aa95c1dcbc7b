"""Custom components package for tests."""
