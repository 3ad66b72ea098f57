"""
Lemma Matcher
=============
Reconciles Georgian word lists with reference lemma dictionaries:
- Reference loading with automatic layout detection
- Exact and transliteration-variant matching
- Batched processing with running statistics
- Tab-separated result export
"""

__version__ = "1.0.0"

# Module information
MODULES = {
    'core': 'Transliteration, schema detection, indexing, matching and export',
    'api': 'FastAPI endpoints for sessions, matching and results',
    'tasks': 'Session registry and idle-session cleanup',
}
