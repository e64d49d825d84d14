"""Typed polygon.io response records and their default decoders."""
