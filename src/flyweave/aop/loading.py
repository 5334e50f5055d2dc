"""Resolve container definitions to class metadata."""

from __future__ import annotations

from flyweave.aop.metadata import ClassMetadata, class_metadata_from_type
from flyweave.container.class_loader import load_class
from flyweave.container.definition import Definition
from flyweave.container.exceptions import ClassNotFoundError


class ClassResolver:
    """Loads the class of a definition and introspects it.

    Returns None when the definition names no class or the class cannot be
    loaded; the matching pass then leaves the definition alone.
    """

    def __call__(self, definition: Definition) -> ClassMetadata | None:
        if not definition.class_name:
            return None
        try:
            cls = load_class(definition.class_name, definition.file)
        except ClassNotFoundError:
            return None
        return class_metadata_from_type(cls)
