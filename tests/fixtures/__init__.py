"""Shared test fixtures for gup."""
