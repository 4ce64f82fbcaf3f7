"""Static tables of quantum-vulnerable Go packages and functions."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping


class Category(Enum):
    ELLIPTIC_CURVE = "elliptic-curve"
    INTEGER_FACTORIZATION = "integer-factorization"
    KEY_EXCHANGE = "quantum-vulnerable-key-exchange"

    @property
    def rule_id(self) -> str:
        return f"pqc.import.{self.value}"

    def message(self, literal: str) -> str:
        return CATEGORY_MESSAGES[self].format(literal=literal)


CATEGORY_MESSAGES: Mapping[Category, str] = MappingProxyType(
    {
        Category.ELLIPTIC_CURVE: "{literal} uses quantum-vulnerable elliptic curve cryptography",
        Category.INTEGER_FACTORIZATION: "{literal} uses quantum-vulnerable integer factorization cryptography",
        Category.KEY_EXCHANGE: '{literal} uses a quantum-vulnerable key exchange; consider "crypto/mlkem"',
    }
)

FUNCTION_RULE_ID = "pqc.function"

# Elliptic-curve based primitives.
EC_IMPORT_PATHS: FrozenSet[str] = frozenset(
    {
        "crypto/ecdh",
        "crypto/ecdsa",
        "crypto/ed25519",
        "crypto/elliptic",
    }
)

# Integer-factorization (and discrete-log) based primitives.
IF_IMPORT_PATHS: FrozenSet[str] = frozenset(
    {
        "crypto/rsa",
        "crypto/dsa",
    }
)

# Key exchange that crypto/mlkem replaces.
KEY_EXCHANGE_PATHS: FrozenSet[str] = frozenset({"crypto/ecdh"})

IMPORT_CATEGORIES: Mapping[Category, FrozenSet[str]] = MappingProxyType(
    {
        Category.ELLIPTIC_CURVE: EC_IMPORT_PATHS,
        Category.INTEGER_FACTORIZATION: IF_IMPORT_PATHS,
        Category.KEY_EXCHANGE: KEY_EXCHANGE_PATHS,
    }
)

VULNERABLE_FUNCTIONS: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {
        "crypto/rsa": frozenset(
            {
                "DecryptOAEP",
                "DecryptPKCS1v15",
                "DecryptPKCS1v15SessionKey",
                "EncryptOAEP",
                "EncryptPKCS1v15",
                "SignPKCS1v15",
                "SignPSS",
                "VerifyPKCS1v15",
                "VerifyPSS",
            }
        ),
        "crypto/ecdsa": frozenset({"SignASN1", "VerifyASN1"}),
        "crypto/des": frozenset({"NewTripleDESCipher"}),
        "crypto/x509": frozenset(
            {
                "MarshalPKCS1PrivateKey",
                "MarshalECPrivateKey",
                "ParsePKCS1PrivateKey",
                "ParseECPrivateKey",
            }
        ),
        "crypto/dsa": frozenset({"Verify", "Sign", "GenerateKey"}),
    }
)


def classify_import(path: str) -> FrozenSet[Category]:
    return frozenset(category for category, paths in IMPORT_CATEGORIES.items() if path in paths)


def import_categories(path: str) -> list[Category]:
    """Categories for ``path`` in reporting order (declaration order of :class:`Category`)."""

    found = classify_import(path)
    return [category for category in Category if category in found]


def classify_function(path: str, name: str) -> bool:
    return name in VULNERABLE_FUNCTIONS.get(path, frozenset())
