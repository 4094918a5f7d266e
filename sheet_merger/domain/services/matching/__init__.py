"""Name matching services.

Normalization, similarity scoring, history lookups and the multi-stage
resolver that maps spreadsheet columns onto target fields.
"""

__all__ = []
