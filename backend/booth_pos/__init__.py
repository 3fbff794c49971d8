"""
Booth POS - point of sale backend for event booths
"""
__version__ = "1.0.0"
