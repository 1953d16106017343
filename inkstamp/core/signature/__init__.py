"""
Signature capture.
"""
from .capture import CapturedSignature, SignatureCapture, SignatureFormat, draw_stroke

__all__ = ['CapturedSignature', 'SignatureCapture', 'SignatureFormat', 'draw_stroke']
