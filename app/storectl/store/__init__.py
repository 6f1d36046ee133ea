"""Content store enumeration and guarded deletion.

This module provides the tree model, the path validator, the tree
builder, and the deletion orchestrator for the content store.
"""

from storectl.store.config import StoreConfig, StoreConfigError, load_store_config
from storectl.store.models import (
    AllowedRoot,
    AuthorizedPath,
    BulkDeletionReport,
    DeletionOutcome,
    ErrorKind,
    Forest,
    Rejection,
    StatusClass,
    TreeNode,
)
from storectl.store.orchestrator import DeletionOrchestrator
from storectl.store.storage import ContentStore, LocalContentStore, PathEscapeError
from storectl.store.tree import TreeBuilder, build_forest
from storectl.store.validator import validate

__all__ = [
    "AllowedRoot",
    "AuthorizedPath",
    "BulkDeletionReport",
    "ContentStore",
    "DeletionOrchestrator",
    "DeletionOutcome",
    "ErrorKind",
    "Forest",
    "LocalContentStore",
    "PathEscapeError",
    "Rejection",
    "StatusClass",
    "StoreConfig",
    "StoreConfigError",
    "TreeBuilder",
    "TreeNode",
    "build_forest",
    "load_store_config",
    "validate",
]
