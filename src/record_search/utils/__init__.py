"""Standalone helpers that the search pipeline does not depend on."""
