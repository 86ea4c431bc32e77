"""
NovaPay request/response models

Acquiring and Checkout share some type names, so models are addressed through
their API module, e.g. ``models.acquiring.CreateSessionRequest``.
"""

from .base import Model, convert, json_field
from . import acquiring, checkout, comfort

__all__ = [
    'Model',
    'convert',
    'json_field',
    'acquiring',
    'checkout',
    'comfort',
]
