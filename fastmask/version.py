"""version init"""
__version__ = "0.1.0"
