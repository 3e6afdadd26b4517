# !/usr/bin/python
# coding=utf-8
"""Detection and classification helpers for component integrity problems."""
from __future__ import annotations

# Lazy-loaded via parent package (componenttk.core_utils or componenttk root)
# No explicit imports needed - bootstrap_package handles attribute resolution
