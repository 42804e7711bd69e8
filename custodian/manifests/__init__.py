# custodian/manifests/__init__.py
"""
Manifest system for Custodianfiles.

Supports:
- EDN Custodianfiles with :name, :nodest and :steps
- Typed step variants decoded once at load time
- Missing manifests treated as "nothing here" rather than an error
"""

from .loader import ManifestLoader, decode_step, load_manifest, parse_manifest
from .model import ArgStep, CopyStep, ImportStep, Manifest, Step, TemplateStep

__all__ = [
    "ManifestLoader",
    "decode_step",
    "load_manifest",
    "parse_manifest",
    "ArgStep",
    "CopyStep",
    "ImportStep",
    "Manifest",
    "Step",
    "TemplateStep",
]
