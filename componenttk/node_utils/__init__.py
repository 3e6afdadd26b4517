# !/usr/bin/python
# coding=utf-8
"""Node utilities for host document nodes.

All classes are lazy-loaded via componenttk root package.
Import from componenttk directly: from componenttk import NodeUtils
"""

# Lazy-loaded via parent package - no explicit imports needed
