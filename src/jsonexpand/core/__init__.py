"""Core infrastructure: configuration, logging, JSON decoding, timestamps."""
