"""Editor integration for the Nextflow language server: artifact resolution and completion labels."""

from .completion import CodeLabel, CodeLabelSpan, Completion, CompletionKind, label_for_completion
from .extension import NextflowExtension
from .resolver import ArtifactResolver
from .settings import NextflowLSPSettings

__version__ = "0.1.0"

__all__ = [
    "ArtifactResolver",
    "CodeLabel",
    "CodeLabelSpan",
    "Completion",
    "CompletionKind",
    "NextflowExtension",
    "NextflowLSPSettings",
    "label_for_completion",
]
