"""Tests for repokit."""
