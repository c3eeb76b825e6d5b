"""Reusable test fixtures for rzup."""
