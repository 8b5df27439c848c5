"""Normalization of cached documents and transcripts."""
