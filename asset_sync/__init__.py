"""
asset-sync: keeps a local asset store in step with a remote content endpoint.
"""

__version__ = "0.3.0"
