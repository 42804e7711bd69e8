# custodian/interpreter.py
"""
Interpreter - walks a manifest's steps in declaration order.

The running context and the tag registry are immutable values: every
merge builds a new mapping, and following an import hands the nested walk
a registry without the consumed tag. A tag can therefore never re-enter
its own import chain, while sibling steps can still import it again.
"""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from .executor import ArgDirective, ImportDirective, StepExecutor
from .manifests.model import Manifest, Step

logger = logging.getLogger(__name__)

Context = Mapping[str, Any]
TagRegistry = Mapping[str, Manifest]

EMPTY_CONTEXT: Context = MappingProxyType({})


def merge_defaults(context: Context, binding: Mapping[str, Any]) -> Context:
    """Return ``context`` extended with ``binding``; existing keys win."""
    merged = dict(binding)
    merged.update(context)
    return MappingProxyType(merged)


def without_tag(tags: TagRegistry, tag: str) -> TagRegistry:
    """Return a copy of ``tags`` with ``tag`` removed."""
    return MappingProxyType({name: m for name, m in tags.items() if name != tag})


class Interpreter:
    """
    Run manifest steps, expanding imports and threading the context.

    Usage:
        interpreter = Interpreter()
        context = await interpreter.run("proj", "proj", manifest.steps, tags)
    """

    def __init__(self, executor: Optional[StepExecutor] = None):
        self.executor = executor or StepExecutor()

    async def run(
        self,
        src_root: str,
        dest_root: str,
        steps: Iterable[Step],
        tags: TagRegistry,
        context: Optional[Context] = None
    ) -> Context:
        """
        Apply ``steps`` in order.

        Args:
            src_root: Root that step sources are resolved against
            dest_root: Root that step destinations are resolved against
            steps: Steps to apply
            tags: Manifests available to ``from`` steps
            context: Seed context (empty when omitted)

        Returns:
            The context after the last step
        """
        context = EMPTY_CONTEXT if context is None else MappingProxyType(dict(context))

        for step in steps:
            directive = await self.executor.apply(src_root, dest_root, step, context)

            if isinstance(directive, ImportDirective):
                imported = tags.get(directive.tag)
                if imported is None:
                    logger.debug("No manifest registered for tag %r, skipping", directive.tag)
                    continue
                # Imports never redirect the destination
                context = await self.run(
                    imported.root,
                    dest_root,
                    imported.steps,
                    without_tag(tags, directive.tag),
                    context,
                )

            elif isinstance(directive, ArgDirective):
                context = merge_defaults(context, directive.binding)

        return context


async def run_steps(
    src_root: str,
    dest_root: str,
    steps: Iterable[Step],
    tags: TagRegistry,
    context: Optional[Context] = None
) -> Context:
    """Run ``steps`` with a default Interpreter."""
    return await Interpreter().run(src_root, dest_root, steps, tags, context)
