"""Study file transformers.

This module rewrites staged source files into the staging format
consumed by downstream loaders.
"""
