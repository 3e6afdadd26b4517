# !/usr/bin/python
# coding=utf-8
"""Host document interface and the in-memory scene document.

All classes are lazy-loaded via componenttk root package.
Import from componenttk directly: from componenttk import HostDocument, SceneDocument
"""

# Lazy-loaded via parent package - no explicit imports needed
