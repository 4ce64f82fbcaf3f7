from __future__ import annotations

from pathlib import Path
import unittest

from pqcscan.errors import MalformedLiteralError
from pqcscan.model import ImportDecl, Position
from pqcscan.resolver import decode_import_path, local_name, resolve

POS = Position(Path("main.go"), 1, 1)


class DecodeImportPathTests(unittest.TestCase):
    def test_interpreted_and_raw_literals(self) -> None:
        self.assertEqual(decode_import_path('"crypto/rsa"'), "crypto/rsa")
        self.assertEqual(decode_import_path("`crypto/rsa`"), "crypto/rsa")
        self.assertEqual(decode_import_path('"crypto\\x2Frsa"'), "crypto/rsa")
        self.assertEqual(decode_import_path('"crypto\\u002frsa"'), "crypto/rsa")
        self.assertEqual(decode_import_path('"crypto\\057rsa"'), "crypto/rsa")

    def test_malformed_literals(self) -> None:
        for literal in ['"crypto/rsa', "crypto/rsa", '"a\\qb"', '"a"b"', "'crypto/rsa'", '"', '"\\ud800"']:
            with self.subTest(literal=literal):
                with self.assertRaises(MalformedLiteralError):
                    decode_import_path(literal)

    def test_error_message_names_the_literal(self) -> None:
        with self.assertRaises(MalformedLiteralError) as ctx:
            decode_import_path('"a\\qb"')
        self.assertIn('"a\\qb"', str(ctx.exception))
        self.assertIsInstance(ctx.exception, ValueError)


class ResolveTests(unittest.TestCase):
    def test_local_name_defaults_to_last_segment(self) -> None:
        self.assertEqual(local_name(ImportDecl('"crypto/ecdsa"', POS)), "ecdsa")
        self.assertEqual(local_name(ImportDecl('"fmt"', POS)), "fmt")
        self.assertEqual(local_name(ImportDecl('"crypto/ecdsa"', POS, alias="c")), "c")

    def test_resolve(self) -> None:
        imports = [
            ImportDecl('"fmt"', POS),
            ImportDecl('"crypto/ecdsa"', POS, alias="c"),
            ImportDecl('"crypto/rsa"', POS),
        ]
        self.assertEqual(resolve(imports, "c"), "crypto/ecdsa")
        self.assertEqual(resolve(imports, "rsa"), "crypto/rsa")
        self.assertIsNone(resolve(imports, "ecdsa"))
        self.assertIsNone(resolve(imports, "key"))
        self.assertIsNone(resolve([], "rsa"))

    def test_blank_and_dot_imports_never_resolve(self) -> None:
        imports = [
            ImportDecl('"crypto/ecdsa"', POS, alias="_"),
            ImportDecl('"crypto/rsa"', POS, alias="."),
        ]
        self.assertIsNone(resolve(imports, "_"))
        self.assertIsNone(resolve(imports, "."))
        self.assertIsNone(resolve(imports, "ecdsa"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
