"""
API Module - FastAPI application over stored index runs.
"""
