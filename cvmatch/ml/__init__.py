"""
Machine learning modules for cvmatch.

Submodules:
- embeddings: Embedding providers, cache, client and vector similarity
"""
