"""Core infrastructure for the indicator engine: errors, logging, and config loading."""
