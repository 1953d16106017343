"""
Inkstamp PDF: place text labels and signatures on PDF pages and export them.
"""
__version__ = "0.1.0"
