"""rsrcgen: encodes resource declarations into template-shaped binary records."""

__version__ = "0.1.0"
