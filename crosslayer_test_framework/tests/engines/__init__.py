"""
Unit tests for the engine adapters.

Copyright (C) 2025, David Beckett https://www.dajobe.org/

This package is Free Software and part of Redland http://librdf.org/
"""

__version__ = "1.0.0"
