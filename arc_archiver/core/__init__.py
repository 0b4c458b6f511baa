"""
Core Arc folder archiving modules.

This package contains the share page client, the folder tree transformer,
the archive database and service, and the folder exporters.
"""

from .archive_service import ArchiveNotFoundError, ArchiveService
from .database import ArchiveDatabase, ArchivedFolder
from .folder_transformer import FolderTransformer, transform_arc_folder
from .models import ArcFolder, ArcItem, ItemKind, PresentationFolder, PresentationNode
from .share_client import (
    ArcShareClient,
    ArcShareError,
    FetchFailure,
    MalformedDocument,
    MalformedJson,
    SchemaViolation,
)

__all__ = [
    'ArchiveNotFoundError',
    'ArchiveService',
    'ArchiveDatabase',
    'ArchivedFolder',
    'FolderTransformer',
    'transform_arc_folder',
    'ArcFolder',
    'ArcItem',
    'ItemKind',
    'PresentationFolder',
    'PresentationNode',
    'ArcShareClient',
    'ArcShareError',
    'FetchFailure',
    'MalformedDocument',
    'MalformedJson',
    'SchemaViolation',
]
