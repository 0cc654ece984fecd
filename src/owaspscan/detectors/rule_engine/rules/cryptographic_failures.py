# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A02 Cryptographic Failures rules."""

from __future__ import annotations

import re

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import (
    env_lookup,
    redact_secret,
    secret_assignment,
    sub_outside_strings,
)

_SECRET_KEYS = (
    r"api[_-]?key|apikey|secret[_-]?key|client[_-]?secret|app[_-]?secret|"
    r"access[_-]?token|auth[_-]?token|private[_-]?key|aws[_-]?secret|secret"
)
_SECRET_ASSIGNMENT = secret_assignment(_SECRET_KEYS)
_VENDOR_KEY = re.compile(
    r"""(["'])(?:AKIA[0-9A-Z]{16}|sk_live_[0-9a-zA-Z]{24,}|ghp_[A-Za-z0-9]{36}|xox[bpsa]-[0-9A-Za-z\-]{10,})\1"""
)
_PLACEHOLDER_VALUES = (
    r"""(?i)(?:environ|getenv|process\.env|\$\{|["']<[^>"'\n]{0,40}>["']|your[_-]|example|placeholder|xxx)"""
)


@rule
class HardcodedSecret(BaseRule):
    rule_id = "OWASP-A02-001"
    title = "Hardcoded API key or secret"
    severity = Severity.HIGH
    category = OwaspCategory.CRYPTOGRAPHIC_FAILURES
    description = "A key, token, or secret is embedded in source code"
    recommendation = "Load secrets from the environment or a secret manager and rotate the exposed value."
    redact_snippet = True
    matcher = line_matcher(
        _SECRET_ASSIGNMENT,
        _VENDOR_KEY,
        r"""-----BEGIN\s+(?:RSA\s+|EC\s+|OPENSSH\s+)?PRIVATE\s+KEY-----""",
        suppress=[_PLACEHOLDER_VALUES],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        text = redact_secret(fragment, language, _SECRET_ASSIGNMENT)
        return _VENDOR_KEY.sub(lambda _m: env_lookup("API_KEY", language), text)


_HASH_FIXES = [
    (re.compile(r"""\bhashlib\.(?:md5|sha1)\s*\("""), "hashlib.sha256("),
    (re.compile(r"""\bhashlib\.new\(\s*(["'])(?:md5|sha1)\1""", re.IGNORECASE), r"hashlib.new(\1sha256\1"),
    (re.compile(r"""\bcreateHash\(\s*(["'])(?:md5|sha1)\1""", re.IGNORECASE), r"createHash(\1sha256\1"),
    (re.compile(r"""\bgetInstance\(\s*"(?:MD5|SHA-?1)\""""), 'getInstance("SHA-256"'),
    (re.compile(r"""\bhash\(\s*(["'])(?:md5|sha1)\1""", re.IGNORECASE), r"hash(\1sha256\1"),
]
_PHP_BARE_HASH = re.compile(r"""(?<![\w.>$])(?:md5|sha1)\s*\(""")


@rule
class WeakHash(BaseRule):
    rule_id = "OWASP-A02-002"
    title = "Weak hash algorithm"
    severity = Severity.MEDIUM
    category = OwaspCategory.CRYPTOGRAPHIC_FAILURES
    description = "MD5 or SHA-1 is used; both are broken for collision resistance"
    recommendation = (
        "Use SHA-256 or stronger for integrity checks, and a password hashing "
        "function (bcrypt, scrypt, Argon2) for passwords."
    )
    matcher = line_matcher(
        r"""\bhashlib\.(?:md5|sha1)\s*\(""",
        re.compile(r"""\bhashlib\.new\(\s*["'](?:md5|sha1)["']""", re.IGNORECASE),
        re.compile(r"""\bcreateHash\(\s*["'](?:md5|sha1)["']""", re.IGNORECASE),
        r"""\bMessageDigest\.getInstance\(\s*"(?:MD5|SHA-?1)\"""",
        re.compile(r"""\bhash\(\s*["'](?:md5|sha1)["']""", re.IGNORECASE),
        _PHP_BARE_HASH,
        r"""\b(?:MD5|SHA1)_(?:Init|Update|Final)\b""",
        suppress=[r"""usedforsecurity\s*=\s*False"""],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        for pattern, repl in _HASH_FIXES:
            fragment = pattern.sub(repl, fragment)
        if language in (Language.PHP, Language.GENERAL):
            fragment = sub_outside_strings(_PHP_BARE_HASH, "hash('sha256', ", fragment)
        return fragment


_CIPHER_FIXES = [
    (re.compile(r"""Cipher\.getInstance\(\s*"(?:DES|DESede|RC4|RC2|Blowfish|AES/ECB)[^"\n]*\""""), 'Cipher.getInstance("AES/GCM/NoPadding"'),
    (re.compile(r"""\bMODE_ECB\b"""), "MODE_GCM"),
    (re.compile(r"""\b(?:DES3?|ARC4|Blowfish)\.new\s*\("""), "AES.new("),
    (re.compile(r"""\bcreateCipher\s*\("""), "createCipheriv("),
    (
        re.compile(r"""(["'])(?:des(?:-ede3)?(?:-cbc)?|rc4|bf(?:-cbc)?|aes-\d+-ecb)\1""", re.IGNORECASE),
        r"\1aes-256-gcm\1",
    ),
]


@rule
class WeakCipher(BaseRule):
    rule_id = "OWASP-A02-003"
    title = "Weak or broken cipher"
    severity = Severity.HIGH
    category = OwaspCategory.CRYPTOGRAPHIC_FAILURES
    description = "DES, RC4, Blowfish, or ECB mode is used for encryption"
    recommendation = "Use an authenticated cipher such as AES-256-GCM with a random nonce per message."
    matcher = line_matcher(
        r"""Cipher\.getInstance\(\s*"(?:DES|DESede|RC4|RC2|Blowfish|AES/ECB)""",
        r"""\bAES\.new\([^)\n]{0,200}MODE_ECB""",
        r"""\b(?:DES3?|ARC4|Blowfish)\.new\s*\(""",
        re.compile(
            r"""\b(?:createCipher(?:iv)?|openssl_encrypt|openssl_decrypt)\s*\([^)\n]{0,200}["'](?:des|rc4|bf|aes-\d+-ecb)""",
            re.IGNORECASE,
        ),
        r"""\bmcrypt_(?:encrypt|decrypt)\s*\(""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        for pattern, repl in _CIPHER_FIXES:
            fragment = pattern.sub(repl, fragment)
        return fragment


_PY_RANDOM = re.compile(r"""\brandom\.(?=(?:random|randint|choice|choices|randrange|getrandbits|uniform|sample|shuffle)\s*\()""")
_JS_RANDOM = re.compile(r"""\bMath\.random\s*\(\s*\)""")
_PHP_RANDOM = re.compile(r"""(?<![\w>$])(?:mt_rand|rand)\s*\(""")
_PHP_UNIQID = re.compile(r"""(?<![\w>$])uniqid\s*\([^()\n]*\)""")
_JAVA_RANDOM = re.compile(r"""\bnew\s+Random\s*\(""")


@rule
class InsecureRandomness(BaseRule):
    rule_id = "OWASP-A02-004"
    title = "Insecure random number generator"
    severity = Severity.MEDIUM
    category = OwaspCategory.CRYPTOGRAPHIC_FAILURES
    description = "A predictable pseudo-random generator is used where unpredictability may matter"
    recommendation = "Use a cryptographically secure generator for tokens, keys, and identifiers."
    matcher = line_matcher(
        _PY_RANDOM,
        _JS_RANDOM,
        _PHP_RANDOM,
        _PHP_UNIQID,
        _JAVA_RANDOM,
        r"""\bsrand\s*\(""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        if language in (Language.PYTHON, Language.GENERAL):
            fragment = sub_outside_strings(_PY_RANDOM, "secrets.SystemRandom().", fragment)
        if language in (Language.JAVASCRIPT, Language.HTML, Language.GENERAL):
            fragment = sub_outside_strings(
                _JS_RANDOM, "crypto.getRandomValues(new Uint32Array(1))[0] / 4294967296", fragment
            )
        if language == Language.PHP:
            fragment = sub_outside_strings(_PHP_RANDOM, "random_int(", fragment)
            fragment = sub_outside_strings(_PHP_UNIQID, "bin2hex(random_bytes(16))", fragment)
        if language == Language.JAVA:
            fragment = _JAVA_RANDOM.sub("new SecureRandom(", fragment)
        return fragment


_CLEARTEXT_URL = re.compile(r"""(["'])http://(?!(?:localhost|127\.0\.0\.1|0\.0\.0\.0)\b)(?=[A-Za-z0-9])""")


@rule
class CleartextTransport(BaseRule):
    rule_id = "OWASP-A02-005"
    title = "Cleartext HTTP URL"
    severity = Severity.LOW
    category = OwaspCategory.CRYPTOGRAPHIC_FAILURES
    description = "A remote resource is referenced over unencrypted HTTP"
    recommendation = "Use HTTPS for every non-local endpoint."
    matcher = line_matcher(
        _CLEARTEXT_URL,
        suppress=[r"""xmlns|www\.w3\.org|schemas\.|purl\.org"""],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        return _CLEARTEXT_URL.sub(r"\1https://", fragment)


_TLS_FIXES = [
    (re.compile(r"""\bverify\s*=\s*False\b"""), "verify=True"),
    (re.compile(r"""\b(rejectUnauthorized\s*:\s*)false\b"""), r"\1true"),
    (re.compile(r"""(NODE_TLS_REJECT_UNAUTHORIZED["']?\s*[=:]\s*)(["']?)0\2"""), r"\g<1>\g<2>1\g<2>"),
    (re.compile(r"""(CURLOPT_SSL_VERIFYPEER\s*,\s*)(?:false|0)\b""", re.IGNORECASE), r"\1true"),
    (re.compile(r"""(CURLOPT_SSL_VERIFYHOST\s*,\s*)(?:false|0)\b""", re.IGNORECASE), r"\g<1>2"),
    (re.compile(r"""\bssl\._create_unverified_context\b"""), "ssl.create_default_context"),
    (re.compile(r"""\bCERT_NONE\b"""), "CERT_REQUIRED"),
]


@rule
class TlsVerificationDisabled(BaseRule):
    rule_id = "OWASP-A02-006"
    title = "TLS certificate verification disabled"
    severity = Severity.HIGH
    category = OwaspCategory.CRYPTOGRAPHIC_FAILURES
    description = "Server certificates are not verified, allowing man-in-the-middle attacks"
    recommendation = "Keep certificate verification on; trust a private CA bundle instead of disabling checks."
    matcher = line_matcher(
        r"""\bverify\s*=\s*False\b""",
        r"""\brejectUnauthorized\s*:\s*false\b""",
        r"""NODE_TLS_REJECT_UNAUTHORIZED["']?\s*[=:]\s*["']?0""",
        re.compile(r"""CURLOPT_SSL_VERIFY(?:PEER|HOST)\s*,\s*(?:false|0)\b""", re.IGNORECASE),
        r"""\bssl\._create_unverified_context\b""",
        r"""\bCERT_NONE\b""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        for pattern, repl in _TLS_FIXES:
            fragment = pattern.sub(repl, fragment)
        return fragment
