"""
Imot - backend de avalúo de inmuebles
"""

__version__ = "1.0.0"
