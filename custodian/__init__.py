"""
Custodian - project scaffolding from reusable template packs.

This package provides:
- ManifestLoader: Custodianfile discovery and parsing
- StepExecutor: copy/template/arg/from step application
- Interpreter: ordered step walk with recursive imports
- Session: the top-level "apply packs to a project" driver
"""

__version__ = "0.1.0"

from custodian.config import settings
from custodian.errors import CustodianError, InvalidManifest, InvalidStep, UnknownStepType
from custodian.executor import Action, ArgDirective, ImportDirective, StepExecutor, apply_step
from custodian.interpreter import Interpreter, run_steps
from custodian.manifests import ManifestLoader, Manifest, load_manifest, parse_manifest
from custodian.session import Session, run

__all__ = [
    "settings",
    "CustodianError",
    "InvalidManifest",
    "InvalidStep",
    "UnknownStepType",
    "Action",
    "ArgDirective",
    "ImportDirective",
    "StepExecutor",
    "apply_step",
    "Interpreter",
    "run_steps",
    "ManifestLoader",
    "Manifest",
    "load_manifest",
    "parse_manifest",
    "Session",
    "run",
]
