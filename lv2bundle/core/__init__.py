"""
Core bundle checks.

Components:
- BundleValidator: structural validation of a typed bundle
"""

from .validators import BundleValidator

__all__ = ['BundleValidator']
