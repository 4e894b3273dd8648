"""
Core business logic modules for cvmatch.

Submodules:
- matching: Candidate retrieval, pair scoring, aggregation and the engine facade
- variants: Focus-area analysis and CV variant ranking
"""
