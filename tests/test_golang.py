from __future__ import annotations

from pathlib import Path
import tempfile
from textwrap import dedent
import unittest

from pqcscan.golang import iter_source_files, parse_file, parse_source
from pqcscan.matcher import analyze
from pqcscan.model import AssignStmt, Call, CompoundStmt, ExprStmt, Ident, Opaque, Selector


SOURCE = dedent(
    """\
    package main

    import (
        "crypto/ecdsa"
        c "crypto/rsa"
        _ "crypto/ed25519"
        . "crypto/dsa"
    )

    func main() {
        ecdsa.SignASN1(nil, nil, nil)
        sig, err := c.SignPSS(nil, 0, nil, nil)
        if err != nil {
            c.VerifyPSS(nil, 0, nil, sig, nil)
        }
    }

    func (s *Signer) Sign() {}

    func external() int
    """
).encode()


class GoFrontEndTests(unittest.TestCase):
    def setUp(self) -> None:
        self.parsed = parse_source(SOURCE, "main.go")

    def test_package_and_imports(self) -> None:
        self.assertEqual(self.parsed.package, "main")
        self.assertFalse(self.parsed.is_external_test)
        self.assertEqual(
            [(spec.literal, spec.alias) for spec in self.parsed.imports],
            [
                ('"crypto/ecdsa"', None),
                ('"crypto/rsa"', "c"),
                ('"crypto/ed25519"', "_"),
                ('"crypto/dsa"', "."),
            ],
        )
        first = self.parsed.imports[0].position
        self.assertEqual((first.line, first.column), (4, 5))
        self.assertEqual(self.parsed.imports[1].position.line, 5)

    def test_functions_and_methods(self) -> None:
        names = [func.name for func in self.parsed.functions]
        self.assertEqual(names, ["main", "Sign", "external"])
        method = self.parsed.functions[1]
        self.assertEqual(method.receiver, "(s *Signer)")
        self.assertEqual(method.body, ())
        self.assertIsNone(self.parsed.functions[2].body)

    def test_statement_shapes(self) -> None:
        body = self.parsed.functions[0].body
        self.assertEqual(len(body), 3)
        expr_stmt, assign, branch = body
        self.assertIsInstance(expr_stmt, ExprStmt)
        self.assertIsInstance(expr_stmt.expr, Call)
        callee = expr_stmt.expr.callee
        self.assertIsInstance(callee, Selector)
        self.assertEqual(callee.member, "SignASN1")
        self.assertEqual(callee.operand, Ident("ecdsa", callee.operand.position))
        self.assertEqual((callee.operand.position.line, callee.operand.position.column), (11, 5))
        self.assertEqual(len(expr_stmt.expr.args), 3)

        self.assertIsInstance(assign, AssignStmt)
        self.assertEqual([lhs.name for lhs in assign.lhs], ["sig", "err"])
        self.assertEqual(len(assign.rhs), 1)
        self.assertIsInstance(assign.rhs[0], Call)

        self.assertIsInstance(branch, CompoundStmt)
        self.assertEqual(branch.kind, "if_statement")
        self.assertEqual(branch.expressions[0], Ident("err", branch.expressions[0].position))
        self.assertEqual(len(branch.body), 1)
        self.assertIsInstance(branch.body[0], ExprStmt)

    def test_end_to_end_analysis(self) -> None:
        diagnostics = analyze(self.parsed)
        self.assertEqual(
            [(d.position.line, d.message) for d in diagnostics],
            [
                (4, '"crypto/ecdsa" uses quantum-vulnerable elliptic curve cryptography'),
                (5, '"crypto/rsa" uses quantum-vulnerable integer factorization cryptography'),
                (6, '"crypto/ed25519" uses quantum-vulnerable elliptic curve cryptography'),
                (7, '"crypto/dsa" uses quantum-vulnerable integer factorization cryptography'),
                (11, 'function "ecdsa.SignASN1" implements quantum-vulnerable cryptography'),
                (12, 'function "c.SignPSS" implements quantum-vulnerable cryptography'),
            ],
        )
        deep = analyze(self.parsed, deep=True)
        self.assertEqual(deep[-1].message, 'function "c.VerifyPSS" implements quantum-vulnerable cryptography')
        self.assertEqual(deep[-1].position.line, 14)

    def test_aliased_single_import(self) -> None:
        source = dedent(
            """\
            package signer

            import c "crypto/ecdsa"

            func sign() {
                c.SignASN1(nil, nil, nil)
            }
            """
        ).encode()
        diagnostics = analyze(parse_source(source, "signer.go"))
        self.assertEqual(len(diagnostics), 2)
        self.assertEqual(diagnostics[0].position.line, 3)
        self.assertEqual(diagnostics[1].message, 'function "c.SignASN1" implements quantum-vulnerable cryptography')
        self.assertEqual((diagnostics[1].position.line, diagnostics[1].position.column), (6, 5))

    def test_external_test_package(self) -> None:
        parsed = parse_source(b"package signer_test\n", "signer_test.go")
        self.assertTrue(parsed.is_external_test)

    def test_parse_file_and_discovery(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "pkg").mkdir()
            (root / "pkg" / "b.go").write_text("package pkg\n")
            (root / "a.go").write_text('package main\n\nimport "crypto/rsa"\n')
            (root / "notes.txt").write_text("crypto/rsa")
            files = iter_source_files(root)
            self.assertEqual([path.name for path in files], ["a.go", "b.go"])
            parsed = parse_file(root / "a.go")
            self.assertEqual(parsed.path, root / "a.go")
            self.assertEqual(parsed.imports[0].literal, '"crypto/rsa"')

    def test_discovery_skips_directories_the_go_tool_ignores(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for relative in (
                "main.go",
                "pkg/lib.go",
                "testdata/fixture.go",
                "pkg/testdata/nested.go",
                "vendor/dep/dep.go",
                "_examples/ex.go",
                ".cache/gen.go",
                "_scratch.go",
                ".hidden.go",
            ):
                path = root / relative
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text("package x\n")
            files = iter_source_files(root)
            self.assertEqual(
                [path.relative_to(root).as_posix() for path in files],
                ["main.go", "pkg/lib.go"],
            )

    def test_long_operator_chain_is_flattened(self) -> None:
        terms = " + ".join(['"x"'] * 600)
        source = (
            'package big\n\nimport "crypto/rsa"\n\nfunc build() {\n'
            f"    x := {terms}\n"
            "    rsa.SignPSS(nil, 0, nil, nil)\n"
            "}\n"
        ).encode()
        parsed = parse_source(source, "big.go")
        assign = parsed.functions[0].body[0]
        self.assertIsInstance(assign, AssignStmt)
        self.assertIsInstance(assign.rhs[0], Opaque)
        self.assertEqual(assign.rhs[0].operands, ())
        self.assertEqual(len(analyze(parsed)), 2)
        self.assertEqual(len(analyze(parsed, deep=True)), 2)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
