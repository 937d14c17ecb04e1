"""debfacts: turn a tree of Debian binary packages into typed package facts."""

from debfacts.archive import extract_control_map
from debfacts.builder import build_package
from debfacts.facts import FactEmitter, InMemoryFactStore
from debfacts.models import Comparator, ControlMap, Dependency, Package, VersionConstraint
from debfacts.pipeline import IngestFailure, IngestionPipeline, IngestResult, IngestSummary, ingest_path
from debfacts.relations import parse_relationship
from debfacts.scanner import scan_archives
from debfacts.tags import ControlTag, UnknownTag, field_name, tag_from_name

__all__ = [
    "Comparator",
    "ControlMap",
    "ControlTag",
    "Dependency",
    "FactEmitter",
    "InMemoryFactStore",
    "IngestFailure",
    "IngestResult",
    "IngestSummary",
    "IngestionPipeline",
    "Package",
    "UnknownTag",
    "VersionConstraint",
    "build_package",
    "extract_control_map",
    "field_name",
    "ingest_path",
    "parse_relationship",
    "scan_archives",
    "tag_from_name",
]
