# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""OWASP Top 10 (2021) reference data used by the CLI and API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from owaspscan.core.constants import OwaspCategory, Severity


class OwaspReference(BaseModel):
    """Reference entry for one OWASP Top 10 category."""

    model_config = ConfigDict(frozen=True)

    category: OwaspCategory
    code: str
    name: str
    severity: Severity
    description: str
    examples: tuple[str, ...]
    prevention: tuple[str, ...]


def _entry(
    category: OwaspCategory,
    severity: Severity,
    description: str,
    examples: tuple[str, ...],
    prevention: tuple[str, ...],
) -> OwaspReference:
    return OwaspReference(
        category=category,
        code=category.code,
        name=category.title,
        severity=severity,
        description=description,
        examples=examples,
        prevention=prevention,
    )


OWASP_TOP_10: tuple[OwaspReference, ...] = (
    _entry(
        OwaspCategory.BROKEN_ACCESS_CONTROL,
        Severity.CRITICAL,
        "Restrictions on what authenticated users are allowed to do are not properly enforced.",
        (
            "Accessing other users' data by modifying URL parameters",
            "Reading arbitrary files through path traversal",
            "CORS configuration that trusts every origin",
        ),
        (
            "Deny by default, except for public resources",
            "Enforce access control on the server side",
            "Canonicalize and confine file paths to an allowed directory",
        ),
    ),
    _entry(
        OwaspCategory.CRYPTOGRAPHIC_FAILURES,
        Severity.HIGH,
        "Failures related to cryptography which often lead to sensitive data exposure.",
        (
            "Transmitting data in clear text",
            "Using old or weak algorithms such as MD5, SHA-1 or DES",
            "Hardcoded keys and secrets in source code",
        ),
        (
            "Encrypt all data in transit with TLS and verify certificates",
            "Use strong, current algorithms and a CSPRNG",
            "Load secrets from the environment or a secret manager",
        ),
    ),
    _entry(
        OwaspCategory.INJECTION,
        Severity.CRITICAL,
        "Untrusted data is sent to an interpreter as part of a command or query.",
        (
            "SQL injection through string-built queries",
            "OS command injection",
            "Cross-site scripting through unescaped output",
        ),
        (
            "Use parameterized queries or prepared statements",
            "Pass process arguments as a list, never through a shell",
            "Encode output for the context it is rendered in",
        ),
    ),
    _entry(
        OwaspCategory.INSECURE_DESIGN,
        Severity.HIGH,
        "Missing or ineffective control design, such as trusting client input.",
        (
            "Using request parameters without validation",
            "Business logic that relies on client-side checks",
        ),
        (
            "Validate every input against an allow-list on the server",
            "Use threat modeling for critical flows",
        ),
    ),
    _entry(
        OwaspCategory.SECURITY_MISCONFIGURATION,
        Severity.HIGH,
        "Insecure defaults, verbose errors, or missing hardening.",
        (
            "Debug mode enabled in production",
            "Stack traces returned to clients",
            "Missing security headers",
        ),
        (
            "Disable debug features outside development",
            "Return generic error messages and log details server side",
            "Set security headers such as CSP and HSTS",
        ),
    ),
    _entry(
        OwaspCategory.VULNERABLE_COMPONENTS,
        Severity.MEDIUM,
        "Use of components or APIs that are outdated, removed, or unsafe by design.",
        (
            "Unbounded C string functions such as gets or strcpy",
            "Removed APIs such as PHP mysql_* functions",
            "Outdated client libraries with known CVEs",
        ),
        (
            "Replace unsafe APIs with bounded equivalents",
            "Track and update dependencies continuously",
        ),
    ),
    _entry(
        OwaspCategory.AUTHENTICATION_FAILURES,
        Severity.HIGH,
        "Weaknesses in confirming identity, authentication, or session management.",
        (
            "Hardcoded or default passwords",
            "Tokens accepted without signature verification",
            "Session cookies without Secure or HttpOnly flags",
        ),
        (
            "Never embed credentials in code",
            "Always verify token signatures with an explicit algorithm list",
            "Set Secure, HttpOnly and SameSite on session cookies",
        ),
    ),
    _entry(
        OwaspCategory.INTEGRITY_FAILURES,
        Severity.HIGH,
        "Code and data integrity is not protected against tampering.",
        (
            "Deserializing untrusted data with pickle or unserialize",
            "Loading third-party scripts without integrity checks",
        ),
        (
            "Use data-only formats such as JSON for untrusted input",
            "Add Subresource Integrity hashes to external scripts",
        ),
    ),
    _entry(
        OwaspCategory.LOGGING_FAILURES,
        Severity.MEDIUM,
        "Insufficient logging, or logging that leaks sensitive data.",
        (
            "Empty exception handlers that swallow errors",
            "Passwords or tokens written to logs",
        ),
        (
            "Log security-relevant failures with context",
            "Never log secrets; mask them before logging",
        ),
    ),
    _entry(
        OwaspCategory.SSRF,
        Severity.HIGH,
        "The server fetches a remote resource from a user-supplied URL without validation.",
        (
            "Fetching a URL taken directly from a query parameter",
            "Proxy endpoints that reach internal services",
        ),
        (
            "Validate URLs against an allow-list of hosts and schemes",
            "Block requests to private and link-local address ranges",
        ),
    ),
)


def get_reference(category: OwaspCategory) -> OwaspReference:
    return OWASP_TOP_10[category.value - 1]
