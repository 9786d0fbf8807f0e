"""Donjara scoring HTTP service.

Usage:
    python -m donjara_scorer.api.run

Then POST hands to http://localhost:8000/api/score.
"""

__version__ = "0.1.0"
