# custodian/session.py
"""
Session Driver - the single entry point for applying packs to a project.

1. Load every import root (concurrently) and key them by name
2. Load the destination's own Custodianfile
3. Refuse destinations carrying the nodest pragma
4. Interpret the destination manifest with the imported packs available
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Optional, Sequence

from .executor import Action, StepExecutor
from .interpreter import EMPTY_CONTEXT, Context, Interpreter, TagRegistry
from .manifests.loader import ManifestLoader
from .manifests.model import Manifest

logger = logging.getLogger(__name__)


def build_registry(manifests: Iterable[Optional[Manifest]]) -> TagRegistry:
    """
    Key manifests by name, ignoring roots that had no Custodianfile.

    When two manifests share a name the one appearing first wins.
    """
    registry = {}
    for manifest in manifests:
        if manifest is not None and manifest.name not in registry:
            registry[manifest.name] = manifest
    return MappingProxyType(registry)


@dataclass
class Session:
    """
    Apply a destination's Custodianfile with a set of importable packs.

    Usage:
        session = Session()
        await session.run(["packs/base", "packs/python-lib"], "my-project")
        for action in session.actions:
            ...
    """

    loader: ManifestLoader = field(default_factory=ManifestLoader)
    actions: List[Action] = field(default_factory=list)

    async def run(self, import_roots: Sequence[str], dest_root: str) -> Optional[Context]:
        """
        Run the session.

        Returns:
            The final context, or None when there was nothing to apply
        """
        tags = build_registry(await self.loader.load_many(import_roots))

        manifest = await self.loader.load(dest_root)
        if manifest is None:
            logger.info("Nothing to do here...")
            return None

        if manifest.no_dest:
            logger.info("The specified destination has the `nodest` pragma. Stopping.")
            return None

        interpreter = Interpreter(StepExecutor(actions=self.actions))
        return await interpreter.run(dest_root, dest_root, manifest.steps, tags, EMPTY_CONTEXT)


async def run(import_roots: Sequence[str], dest_root: str) -> Optional[Context]:
    """Apply ``dest_root``'s Custodianfile using the packs in ``import_roots``."""
    return await Session().run(import_roots, dest_root)
