"""
Bengkel API

HTTP endpoints for a workshop's stock, cart and transaction history,
stored in a hosted document database.
"""

from bengkel_api.store.base import Collection, DocumentStore

__all__ = ['Collection', 'DocumentStore']
