"""
Unctico clinical safety engine.

Contraindication detection, red-flag tracking, the treatment safety gate and
safety statistics for a massage-therapy practice.
"""

__version__ = "0.1.0"
