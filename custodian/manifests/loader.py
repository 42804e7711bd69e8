# custodian/manifests/loader.py
"""
Manifest Loader for Custodianfiles.

A Custodianfile is an EDN map:

    {:name "python-lib"
     :nodest true
     :steps [(copy "setup.cfg")
             (xtemplate "README.md.tmpl" "README.md")
             (arg "license" "MIT")
             (from "base")]}

Supports:
- Missing manifests (loaded as None, never an error)
- Case-insensitive step types with an "x" prefix for conditional steps
- Concurrent loading of several pack roots
"""

import asyncio
import logging
import os
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, List, Optional

import edn_format

from ..config import settings
from ..errors import InvalidManifest, InvalidStep, UnknownStepType
from .model import ArgStep, CopyStep, ImportStep, Manifest, Step, TemplateStep

logger = logging.getLogger(__name__)

FILE_STEP_TYPES = {
    "copy": CopyStep,
    "xcopy": CopyStep,
    "template": TemplateStep,
    "xtemplate": TemplateStep,
}

STEP_TYPES = frozenset(FILE_STEP_TYPES) | {"arg", "from"}


def _to_python(value: Any) -> Any:
    """Convert edn_format values into plain dicts, lists and strings."""
    if isinstance(value, edn_format.Keyword):
        return f":{value.name}"
    if isinstance(value, edn_format.Symbol):
        return value.name
    if isinstance(value, (str, bytes)):
        return value
    if isinstance(value, Mapping):
        return {_to_python(k): _to_python(v) for k, v in value.items()}
    if isinstance(value, Sequence):
        return [_to_python(v) for v in value]
    return value


def _step_type(raw: Any) -> str:
    head = raw[0]
    if not isinstance(head, str):
        raise UnknownStepType(raw)
    return head.lstrip(":").lower()


def decode_step(raw: Any) -> Step:
    """
    Turn one positional step declaration into a Step.

    This is the only place that knows the ``(type arg ...)`` layout.

    Raises:
        UnknownStepType: If the declared type is not recognised
        InvalidStep: If a recognised step is missing its arguments
    """
    if not isinstance(raw, list) or not raw:
        raise UnknownStepType(raw)

    step_type = _step_type(raw)
    if step_type not in STEP_TYPES:
        raise UnknownStepType(raw)

    if len(raw) < 2 or raw[1] in (None, ""):
        raise InvalidStep(raw, f"'{step_type}' needs at least one argument")

    if step_type in FILE_STEP_TYPES:
        src = str(raw[1])
        dest = str(raw[2]) if len(raw) > 2 and raw[2] else src
        return FILE_STEP_TYPES[step_type](
            src=src,
            dest=dest,
            conditional=step_type.startswith("x"),
        )

    if step_type == "arg":
        # (arg name value) or (arg name value fallback); the fallback is
        # only used when the third element is nil or false
        if len(raw) < 3:
            raise InvalidStep(raw, "'arg' needs a name and a value")
        value = raw[2]
        if len(raw) > 3 and (value is None or value is False):
            value = raw[3]
        return ArgStep(name=str(raw[1]), value=value)

    return ImportStep(tag=str(raw[1]))


def parse_manifest(data: str, root: str) -> Manifest:
    """
    Parse Custodianfile text into a Manifest rooted at ``root``.

    Raises:
        InvalidManifest: If the text is not an EDN map with a :steps array
        UnknownStepType: If any step has an unrecognised type
    """
    root = os.path.normpath(root)
    try:
        parsed = _to_python(edn_format.loads(data))
    except edn_format.EDNDecodeError as e:
        raise InvalidManifest(root, f"Invalid EDN: {e}") from e

    if not isinstance(parsed, dict):
        raise InvalidManifest(root, "expected a map at the top level")

    steps = parsed.get(":steps")
    if not isinstance(steps, list):
        raise InvalidManifest(root, "Custodianfile must have an array of steps")

    name = parsed.get(":name")
    return Manifest(
        name=str(name) if name else root,
        root=root,
        steps=tuple(decode_step(step) for step in steps),
        no_dest=bool(parsed.get(":nodest")),
    )


class ManifestLoader:
    """
    Locate and parse the Custodianfile inside a pack root.

    Usage:
        loader = ManifestLoader()
        manifest = await loader.load("packs/python-lib")
    """

    def __init__(
        self,
        manifest_filename: Optional[str] = None,
        encoding: Optional[str] = None
    ):
        self.manifest_filename = manifest_filename or settings.manifest_filename
        self.encoding = encoding or settings.template_encoding

    def manifest_path(self, root: str) -> str:
        return os.path.join(root, self.manifest_filename)

    async def load(self, root: str) -> Optional[Manifest]:
        """
        Load the manifest at ``root``.

        Returns:
            The parsed Manifest, or None when the root has no Custodianfile
        """
        path = self.manifest_path(root)
        if not await asyncio.to_thread(os.path.isfile, path):
            logger.info("No %s found at %s", self.manifest_filename, root)
            return None

        text = await asyncio.to_thread(self._read, path)
        return parse_manifest(text, root)

    async def load_many(self, roots: Iterable[str]) -> List[Optional[Manifest]]:
        """Load several roots concurrently, keeping their order."""
        return list(await asyncio.gather(*(self.load(root) for root in roots)))

    def _read(self, path: str) -> str:
        with open(path, "r", encoding=self.encoding) as f:
            return f.read()


async def load_manifest(root: str) -> Optional[Manifest]:
    """Convenience wrapper around ManifestLoader().load()."""
    return await ManifestLoader().load(root)
