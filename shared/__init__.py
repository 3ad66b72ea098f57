"""
Shared configuration
"""
