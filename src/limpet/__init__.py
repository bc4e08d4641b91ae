"""
Limpet: one object model for IIIF Presentation and Image API documents.

See ``limpet.iiif`` for decoders, the Image API URI grammar and tile
derivation, and ``limpet.cli`` for the command line tool.
"""

__version__ = "0.1.0"
