# custodian/executor.py
"""
Step Executor - applies a single manifest step to the destination.

File-producing steps (copy/template) touch the disk; ``from`` and ``arg``
do no I/O and hand a directive back to the interpreter instead.

Blocking filesystem calls run through ``asyncio.to_thread`` so the event
loop is only ever suspended, never blocked. Nothing here is transactional:
a failing step leaves earlier steps' files in place.
"""

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Union

from .config import settings
from .errors import InvalidStep
from .manifests.model import ArgStep, CopyStep, ImportStep, Step, TemplateStep
from .rendering import render

logger = logging.getLogger(__name__)

Renderer = Callable[[str, Mapping[str, Any]], str]


@dataclass(frozen=True)
class ImportDirective:
    """Ask the interpreter to expand the manifest registered as ``tag``."""
    tag: str


@dataclass(frozen=True)
class ArgDirective:
    """Ask the interpreter to merge ``binding`` into the context."""
    binding: Mapping[str, Any]


Directive = Union[ImportDirective, ArgDirective]


@dataclass(frozen=True)
class Action:
    """Record of one thing the executor did (or skipped)."""
    kind: str  # SKIP, COPY, TEMPLATE, FROM
    src: Optional[str] = None
    dest: Optional[str] = None


def absolutize(root: str, rel: str) -> str:
    """Join ``rel`` onto ``root`` and normalise the result."""
    return os.path.normpath(os.path.join(root, rel))


def _copy(src: str, dest: str) -> None:
    # A destination manifest copying within its own root
    if os.path.exists(dest) and os.path.samefile(src, dest):
        return
    if os.path.isdir(src):
        shutil.copytree(src, dest, copy_function=shutil.copy, dirs_exist_ok=True)
        return
    parent = os.path.dirname(dest)
    if parent:
        os.makedirs(parent, exist_ok=True)
    shutil.copy(src, dest)


class StepExecutor:
    """
    Apply steps against a source root and a destination root.

    Usage:
        executor = StepExecutor()
        directive = await executor.apply("packs/lib", "proj", step, context)
    """

    def __init__(
        self,
        renderer: Optional[Renderer] = None,
        encoding: Optional[str] = None,
        actions: Optional[List[Action]] = None
    ):
        """
        Args:
            renderer: render(template, context) -> text, jinja2 by default
            encoding: Encoding for template sources and outputs
            actions: Optional list every performed action is appended to
        """
        self.renderer = renderer or render
        self.encoding = encoding or settings.template_encoding
        self.actions = actions

    def _record(self, kind: str, src: Optional[str] = None, dest: Optional[str] = None) -> None:
        if self.actions is not None:
            self.actions.append(Action(kind=kind, src=src, dest=dest))

    async def apply(
        self,
        src_root: str,
        dest_root: str,
        step: Step,
        context: Mapping[str, Any]
    ) -> Optional[Directive]:
        """
        Apply one step.

        Returns:
            A directive for ``from``/``arg`` steps, otherwise None

        Raises:
            InvalidStep: If ``step`` is not one of the known variants
            OSError: If a source file is missing or unreadable, or the
                destination cannot be written
        """
        if isinstance(step, (CopyStep, TemplateStep)) and step.conditional:
            if await asyncio.to_thread(os.path.exists, absolutize(dest_root, step.dest)):
                logger.info("SKIP\t%s", step.dest)
                self._record("SKIP", dest=step.dest)
                return None

        if isinstance(step, CopyStep):
            await asyncio.to_thread(
                _copy,
                absolutize(src_root, step.src),
                absolutize(dest_root, step.dest),
            )
            logger.info("COPY\t%s\t%s", step.src, step.dest)
            self._record("COPY", step.src, step.dest)
            return None

        if isinstance(step, TemplateStep):
            await self._template(src_root, dest_root, step, context)
            return None

        if isinstance(step, ImportStep):
            logger.info("FROM\t%s", step.tag)
            self._record("FROM", src=step.tag)
            return ImportDirective(tag=step.tag)

        if isinstance(step, ArgStep):
            return ArgDirective(binding={step.name: step.value})

        raise InvalidStep(step)

    async def _template(
        self,
        src_root: str,
        dest_root: str,
        step: TemplateStep,
        context: Mapping[str, Any]
    ) -> None:
        source = await asyncio.to_thread(self._read, absolutize(src_root, step.src))
        result = self.renderer(source, context)
        logger.info("TEMPLATE\t%s\t%s", step.src, step.dest)
        await asyncio.to_thread(self._write, absolutize(dest_root, step.dest), result)
        self._record("TEMPLATE", step.src, step.dest)

    def _read(self, path: str) -> str:
        with open(path, "r", encoding=self.encoding) as f:
            return f.read()

    def _write(self, path: str, content: str) -> None:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding=self.encoding) as f:
            f.write(content)


async def apply_step(
    src_root: str,
    dest_root: str,
    step: Step,
    context: Mapping[str, Any]
) -> Optional[Directive]:
    """Apply ``step`` with a default StepExecutor."""
    return await StepExecutor().apply(src_root, dest_root, step, context)
