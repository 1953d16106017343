"""
Modal dialogs.
"""
from .signature_dialog import SignatureDialog, SignaturePad

__all__ = ['SignatureDialog', 'SignaturePad']
