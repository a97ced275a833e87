"""Tests for ta_engine.utils."""
