# !/usr/bin/python
# coding=utf-8
"""Batch remediation over the current problem set."""
from __future__ import annotations

# Lazy-loaded via parent package - no explicit imports needed
