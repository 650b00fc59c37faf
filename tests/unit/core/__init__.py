"""Tests for mutualgraph core modules."""
