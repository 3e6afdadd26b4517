# !/usr/bin/python
# coding=utf-8
from pythontk.core_utils.module_resolver import bootstrap_package


__package__ = "componenttk"
__version__ = "0.1.0"

"""Dynamic Attribute Resolver for Module-based Packages

``bootstrap_package`` wires a :class:`ModuleAttributeResolver` into this package so classes
resolve lazily from their modules (``componenttk.NodeClassifier``,
``componenttk.ComponentAuditSlots``, ...) while keeping this module lean.
"""

DEFAULT_INCLUDE = {
    # Host document
    "env_utils.document": ["HostDocument", "NodeKind"],
    "env_utils.scene_document": ["SceneDocument", "SceneNode"],
    # Node access
    "node_utils._node_utils": "NodeUtils",
    # Diagnostics
    "core_utils.diagnostics.issues": [
        "IssueKind",
        "Severity",
        "IssueRecord",
        "Analysis",
        "ScanProfile",
    ],
    "core_utils.diagnostics.classifier": "NodeClassifier",
    "core_utils.diagnostics.walker": ["TreeWalker", "ProgressReporter"],
    "core_utils.diagnostics.scope": ["ScopeResolver", "ScanTarget", "Scope"],
    "core_utils.diagnostics.aggregator": "Aggregator",
    # Session and repair
    "core_utils.session": "ProblemSession",
    "core_utils.repair._repair": ["RemediationEngine", "RemediationResult"],
    # UI boundary
    "ui_utils.component_audit_slots": [
        "AuditEvent",
        "ComponentAuditController",
        "ComponentAuditSlots",
    ],
}

bootstrap_package(
    globals(),
    include=DEFAULT_INCLUDE,
)


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
