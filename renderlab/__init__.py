"""
renderlab: asynchronous resource fetching and sandboxed render-request
coordination.
"""

__version__ = "1.0.0"
