"""Book catalog query service"""

__version__ = "1.0.0"
