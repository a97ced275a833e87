"""Tests for ta_engine.indicators."""
