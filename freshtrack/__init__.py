"""
FreshTrack : suivi des produits périssables et de leurs dates de péremption
"""

__version__ = "1.0.0"
