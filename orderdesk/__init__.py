"""
OrderDesk - order, stock and customer management service
"""

__version__ = "1.0.0"
