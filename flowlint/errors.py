# flowlint/errors.py
"""
Exceptions for inputs flowlint cannot work with at all.

Problems found *inside* a workflow are never raised; they are reported as
`flowlint.result.Issue` objects.
"""


class FlowlintError(Exception):
    """Base class for all flowlint exceptions."""


class WorkflowLoadError(FlowlintError):
    """The workflow file could not be read or is not a JSON/YAML object."""


class RegistryError(FlowlintError):
    """A node registry file is missing or malformed."""


class CredentialStoreError(FlowlintError):
    """A credential export file is missing or malformed."""


class ConfigError(FlowlintError):
    """Invalid profile, environment or false-positive category."""
