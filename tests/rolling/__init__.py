"""Tests for ta_engine.rolling."""
