"""Tests for ta_engine.averages."""
