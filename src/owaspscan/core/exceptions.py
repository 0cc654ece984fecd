# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for owaspscan."""


class OwaspScanError(Exception):
    """Base exception for all owaspscan errors."""


class ConfigurationError(OwaspScanError):
    """Invalid or missing configuration."""


class RuleDefinitionError(OwaspScanError):
    """A rule definition is malformed or uses an unsafe pattern."""


class EmptySourceError(OwaspScanError):
    """Source text is empty or whitespace-only."""


class SourceTooLargeError(OwaspScanError):
    """Source text exceeds the configured size limit."""


class ScanError(OwaspScanError):
    """A scan target could not be read."""
