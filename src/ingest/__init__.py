"""Study import pipeline.

This module resolves per-study import tasks, runs them on a bounded
worker pool and aggregates their outcomes.
"""
