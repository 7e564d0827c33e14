"""Bitboard chess engine and the parts of an online bot client."""

__version__ = "0.1.0"