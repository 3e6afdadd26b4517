# !/usr/bin/python
# coding=utf-8
"""Core utilities: diagnostics, session state and repair.

All classes are lazy-loaded via componenttk root package.
Import from componenttk directly: from componenttk import NodeClassifier, ProblemSession, etc.
"""

# Lazy-loaded via parent package - no explicit imports needed
