# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A10 Server-Side Request Forgery rules."""

from __future__ import annotations

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import wrap_user_input


@rule
class ServerSideRequestForgery(BaseRule):
    rule_id = "OWASP-A10-001"
    title = "Outbound request to a user-supplied URL"
    severity = Severity.HIGH
    category = OwaspCategory.SSRF
    description = "The server fetches a URL taken from the request, which can reach internal services"
    recommendation = (
        "Validate the URL against an allow-list of hosts and schemes, and block "
        "private, loopback, and link-local addresses."
    )
    matcher = line_matcher(
        r"""\b(?:requests|httpx|session)\.(?:get|post|put|delete|head|request)\s*\([^)\n]{0,200}request\.""",
        r"""\burlopen\s*\([^)\n]{0,200}request\.""",
        r"""\b(?:fetch|axios(?:\.\w+)?|got|request|https?\.(?:get|request))\s*\([^)\n]{0,200}req\.(?:query|body|params)""",
        r"""\bcurl_(?:init|setopt)\s*\([^)\n]{0,200}\$_(?:GET|POST|REQUEST)""",
        r"""new\s+URL\s*\([^)\n]{0,200}getParameter""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        return wrap_user_input(fragment, language, "validate_url")
