"""
Promo Studio - AI promotional content service for musicians and writers
"""

__version__ = "0.1.0"
