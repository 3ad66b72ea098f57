"""
Background tasks and in-memory session registry
"""
