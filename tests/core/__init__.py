"""Tests for ta_engine.core."""
