# custodian/manifests/model.py
"""
In-memory representation of a parsed pack.

Provides:
- CopyStep / TemplateStep: file-producing steps (optionally conditional)
- ImportStep: pull in another pack's steps by tag
- ArgStep: bind a named value into the running context
- Manifest: name, root, ordered steps and the nodest guard
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class CopyStep:
    """Copy a file or directory tree from the pack into the destination."""
    src: str
    dest: str
    conditional: bool = False  # xcopy: skip when dest already exists


@dataclass(frozen=True)
class TemplateStep:
    """Render a text template from the pack into the destination."""
    src: str
    dest: str
    conditional: bool = False  # xtemplate: skip when dest already exists


@dataclass(frozen=True)
class ImportStep:
    """Expand the steps of the manifest registered under ``tag``."""
    tag: str


@dataclass(frozen=True)
class ArgStep:
    """Bind ``name`` to ``value`` for subsequent steps."""
    name: str
    value: Any


Step = Union[CopyStep, TemplateStep, ImportStep, ArgStep]


@dataclass(frozen=True)
class Manifest:
    """
    A loaded Custodianfile.

    ``name`` is the key other manifests import it by; it falls back to
    ``root`` when the file does not declare one.
    """
    name: str
    root: str
    steps: Tuple[Step, ...]
    no_dest: bool = False
