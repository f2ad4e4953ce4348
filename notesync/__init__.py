"""
notesync: personal notes client with account-gated synchronization.
"""

__version__ = "0.1.0"
