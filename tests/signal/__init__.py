"""Tests for ta_engine.signal."""
