"""
Inquilex
Legal term recognition, search and annotation for the Lei do Inquilinato
"""

__version__ = "1.0.0"
