"""
Data layer for cvmatch.

Submodules:
- models: Pydantic data models/schemas
- stores: Read-only access to a profile owner's items (component stores)
"""
