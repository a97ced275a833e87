"""Test suite for the ta_engine project.

Tests are organized to mirror the package structure.
"""
