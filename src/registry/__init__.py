"""Study registry providers.

This module exposes the sources of registered study locations
and metadata consumed by task resolution.
"""
