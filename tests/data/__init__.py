"""Tests for ta_engine.data."""
