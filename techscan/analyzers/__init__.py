"""Technology analysis over explored repository files."""

from .manifests import MANIFEST_PARSERS, ManifestError
from .technology import TechnologyAnalyzer, strip_range_prefix, versioned

__all__ = [
    "MANIFEST_PARSERS",
    "ManifestError",
    "TechnologyAnalyzer",
    "strip_range_prefix",
    "versioned",
]
