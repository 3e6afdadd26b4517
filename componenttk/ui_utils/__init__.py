# !/usr/bin/python
# coding=utf-8
"""UI boundary: inbound intents and outbound events for the audit panel.

All classes are lazy-loaded via componenttk root package.
Import from componenttk directly: from componenttk import ComponentAuditSlots
"""

# Lazy-loaded via parent package - no explicit imports needed
