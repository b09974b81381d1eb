"""
API types: enumerations and pydantic wire schemas for the
text-to-speech endpoint (see schemas.py).
"""
