"""
PeerConnect - peer doubt-solving backend
"""

__version__ = "1.0.0"
