"""Cache file decoding and loading."""
