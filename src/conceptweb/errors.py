# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Exception hierarchy for conceptweb.

"""
Exceptions raised by conceptweb.

The layout engine itself never raises for degenerate graphs; these cover
configuration, the concept generator collaborator and the state layer.
"""


class ConceptWebError(Exception):
    """Base class for all conceptweb errors."""


class ConfigError(ConceptWebError, ValueError):
    """Invalid layout configuration."""


class ConceptGenerationError(ConceptWebError):
    """The concept generator failed or returned nothing usable."""


class NetworkNotFoundError(ConceptWebError, KeyError):
    """No word network with the requested id."""


class StoreError(ConceptWebError):
    """Persisted state could not be written."""
