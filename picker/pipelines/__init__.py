"""Pure pipelines for normalization, collation, matching and ranking.

Each step is callable independently and keeps no state between calls.
"""
