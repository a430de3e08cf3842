"""
Form extractors.

One extractor per schema tag, all producing CanonicalFields:
    - versioned.py — V2012, V2014, V2016 (same contract, different paths)
    - legacy.py    — the legacy plan-metadata form
    - schema.py    — SchemaExtractor, which picks the right one
"""

from followup.processing.extractors.schema import SchemaExtractor

__all__ = ["SchemaExtractor"]
