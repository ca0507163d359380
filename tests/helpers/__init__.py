"""Shared builders for the synthetic UBVFF files used across the tests."""
