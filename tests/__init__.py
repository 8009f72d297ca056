"""Tests for gup."""
