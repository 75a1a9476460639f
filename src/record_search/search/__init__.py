"""
Keyword search over in-memory records.

This package provides the one-shot search pipeline:
- schema: Capability layer describing a record's text-bearing fields
- extractor: Flattens a record into labeled text fragments
- scorer: Whole-query and per-keyword scoring of fragments
- ranker: Sorts and truncates per-record accumulators
- engine: Search entry points
"""
