"""
Extraction, enrichment, normalization and validation stages.
"""
