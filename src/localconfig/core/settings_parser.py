# src/localconfig/core/settings_parser.py
"""Safe parser for settings files.

Uses Python's ast module to parse settings files written in a restricted
subset of Python. This is NOT exec() - it's a whitelist-based parser that
only understands literal assignments.

The parser operates in two phases:
1. Parse-time validation: Reject forbidden constructs before anything runs
2. Evaluation: Walk the validated AST and collect the assigned literals

Security model:
- Settings files are edited by hand and may be copied between hosts
- Loading configuration must never execute code, so the grammar is narrowed
  to ``name = literal`` plus explicit ``include('other-file')`` statements

Grammar:
    statement  := NAME "=" literal | "include(" STRING ")"
    literal    := scalar | "[" scalar, ... "]" | "(" scalar, ... ")"
                | "{" STRING ":" scalar, ... "}"
    scalar     := STRING | NUMBER | "-" NUMBER | True | False | None
                  (numbers must be finite: 1e999 is rejected)

Example:
    db_host = 'localhost'
    db_port = 3306
    param_override = {'shadowdb': None, 'use_mailer_queue': 1}
    include('/etc/app/db-password')
"""

from __future__ import annotations

import ast
import math
from pathlib import Path
from typing import Any

# Name of the statement that pulls in another settings file. It cannot be
# used as a variable name.
INCLUDE_STATEMENT = "include"

# Maximum nesting of include() statements
MAX_INCLUDE_DEPTH = 8

_SCALAR_TYPES = (str, int, float, bool)


class SettingsSecurityError(Exception):
    """Raised when a settings file contains forbidden constructs."""


class SettingsSyntaxError(Exception):
    """Raised when a settings file is not valid syntax."""


class SettingsIncludeError(Exception):
    """Raised when an include() cannot be followed (missing file, cycle, depth)."""


def _is_include_call(node: ast.AST) -> bool:
    return (
        isinstance(node, ast.Expr)
        and isinstance(node.value, ast.Call)
        and isinstance(node.value.func, ast.Name)
        and node.value.func.id == INCLUDE_STATEMENT
    )


class _SettingsValidator(ast.NodeVisitor):
    """AST visitor that validates a settings module for security.

    Collects every violation (with line numbers) instead of stopping at the
    first, so an administrator sees all problems in one pass.
    """

    def __init__(self) -> None:
        self.errors: list[str] = []

    def _error(self, node: ast.AST, message: str) -> None:
        line = getattr(node, "lineno", "?")
        self.errors.append(f"line {line}: {message}")

    def visit_Module(self, node: ast.Module) -> None:
        for stmt in node.body:
            if isinstance(stmt, ast.Assign):
                self._check_assign(stmt)
            elif _is_include_call(stmt):
                self._check_include(stmt)
            else:
                self._error(stmt, f"Forbidden statement: {type(stmt).__name__}")

    def _check_assign(self, node: ast.Assign) -> None:
        if len(node.targets) != 1 or not isinstance(node.targets[0], ast.Name):
            self._error(node, "Only single 'name = value' assignments are allowed")
            return
        name = node.targets[0].id
        if name == INCLUDE_STATEMENT:
            self._error(node, f"{INCLUDE_STATEMENT!r} is reserved and cannot be assigned")
            return
        self._check_literal(node.value, depth=0)

    def _check_include(self, node: ast.Expr) -> None:
        call = node.value
        assert isinstance(call, ast.Call)
        if call.keywords or len(call.args) != 1:
            self._error(node, "include() takes exactly one path argument")
            return
        arg = call.args[0]
        if not (isinstance(arg, ast.Constant) and isinstance(arg.value, str)):
            self._error(node, "include() path must be a string literal")

    def _check_literal(self, node: ast.expr, depth: int) -> None:
        if self._is_scalar(node):
            if not self._is_finite(node):
                self._error(node, "Infinite numbers are not allowed")
            return
        if depth > 0:
            self._error(node, "Nested containers are not allowed; values inside lists and dicts must be scalars")
            return
        if isinstance(node, ast.List | ast.Tuple):
            for elt in node.elts:
                self._check_literal(elt, depth + 1)
            return
        if isinstance(node, ast.Dict):
            for key, value in zip(node.keys, node.values, strict=True):
                if key is None:
                    self._error(node, "Dict spread (**) is forbidden")
                    continue
                if not (isinstance(key, ast.Constant) and isinstance(key.value, str)):
                    self._error(key, "Dict keys must be string literals")
                self._check_literal(value, depth + 1)
            return
        self._error(node, f"Forbidden value: {self._describe(node)}")

    def _is_scalar(self, node: ast.expr) -> bool:
        if isinstance(node, ast.Constant):
            return node.value is None or isinstance(node.value, _SCALAR_TYPES)
        # Negative and explicitly positive numbers: -1, +2.5
        return (
            isinstance(node, ast.UnaryOp)
            and isinstance(node.op, ast.USub | ast.UAdd)
            and isinstance(node.operand, ast.Constant)
            and isinstance(node.operand.value, int | float)
            and not isinstance(node.operand.value, bool)
        )

    def _is_finite(self, node: ast.expr) -> bool:
        constant = node.operand if isinstance(node, ast.UnaryOp) else node
        assert isinstance(constant, ast.Constant)
        return not isinstance(constant.value, float) or math.isfinite(constant.value)

    def _describe(self, node: ast.expr) -> str:
        if isinstance(node, ast.Name):
            return f"name reference {node.id!r}"
        if isinstance(node, ast.Call):
            return "function call"
        if isinstance(node, ast.Attribute):
            return f"attribute access {node.attr!r}"
        if isinstance(node, ast.JoinedStr):
            return "f-string"
        if isinstance(node, ast.Constant):
            return f"constant of type {type(node.value).__name__}"
        return type(node).__name__


class _SettingsEvaluator:
    """Evaluates a validated settings module into a name -> value dict."""

    def __init__(self, loader: SettingsParser, source_path: Path | None, depth: int) -> None:
        self._loader = loader
        self._source_path = source_path
        self._depth = depth

    def evaluate(self, module: ast.Module, namespace: dict[str, Any]) -> None:
        for stmt in module.body:
            if isinstance(stmt, ast.Assign):
                target = stmt.targets[0]
                assert isinstance(target, ast.Name)
                namespace[target.id] = self._literal(stmt.value)
            else:
                call = stmt.value  # type: ignore[attr-defined]
                self._include(call.args[0].value, namespace)

    def _include(self, raw_path: str, namespace: dict[str, Any]) -> None:
        path = Path(raw_path).expanduser()
        if not path.is_absolute():
            base = self._source_path.parent if self._source_path is not None else Path.cwd()
            path = base / path
        self._loader._load_into(path, namespace, self._depth + 1)

    def _literal(self, node: ast.expr) -> Any:
        if isinstance(node, ast.Constant):
            return node.value
        if isinstance(node, ast.UnaryOp):
            operand = self._literal(node.operand)
            return -operand if isinstance(node.op, ast.USub) else +operand
        if isinstance(node, ast.List | ast.Tuple):
            return [self._literal(elt) for elt in node.elts]
        if isinstance(node, ast.Dict):
            return {
                self._literal(k): self._literal(v)
                for k, v in zip(node.keys, node.values, strict=True)
                if k is not None
            }
        # Should not reach here if validation passed
        raise SettingsSecurityError(f"Unexpected node: {type(node).__name__}")


class SettingsParser:
    """Safe parser for settings files.

    Parses, validates and evaluates a settings file. Only literal
    assignments and include() statements are allowed.

    Allowed:
    - Assignments: name = 'text', name = 42, name = -1.5, name = None
    - Sequences of scalars: name = ['a', 'b'] (tuples are read as lists)
    - Mappings of string keys to scalars: name = {'key': 'value'}
    - Inclusion: include('relative/or/absolute/path')

    Forbidden:
    - Function calls (except include())
    - Names or attributes used as values
    - Nested containers, comprehensions, lambdas, f-strings
    - Any other statement (import, def, if, augmented assignment, ...)

    Example:
        values = SettingsParser().parse_text("db_port = 3306")
        assert values == {"db_port": 3306}
    """

    def __init__(self, max_include_depth: int = MAX_INCLUDE_DEPTH) -> None:
        self._max_include_depth = max_include_depth
        self._stack: list[Path] = []

    def parse_text(self, text: str, source_path: Path | None = None) -> dict[str, Any]:
        """Parse settings text.

        Args:
            text: Settings source
            source_path: File the text came from (used for error messages and
                for resolving relative include() paths)

        Returns:
            Assigned names mapped to their values, in assignment order

        Raises:
            SettingsSyntaxError: If text is not valid syntax
            SettingsSecurityError: If text contains forbidden constructs
            SettingsIncludeError: If an include() cannot be followed
        """
        namespace: dict[str, Any] = {}
        self._evaluate_text(text, source_path, namespace, depth=0)
        return namespace

    def parse_file(self, path: Path) -> dict[str, Any]:
        """Parse a settings file (UTF-8).

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        namespace: dict[str, Any] = {}
        self._load_into(path, namespace, depth=0)
        return namespace

    def _load_into(self, path: Path, namespace: dict[str, Any], depth: int) -> None:
        if depth > self._max_include_depth:
            raise SettingsIncludeError(f"include() nested deeper than {self._max_include_depth} levels at {path}")
        resolved = path.resolve()
        if resolved in self._stack:
            chain = " -> ".join(str(p) for p in [*self._stack, resolved])
            raise SettingsIncludeError(f"include() cycle: {chain}")
        if depth > 0 and not resolved.is_file():
            raise SettingsIncludeError(f"Included file not found: {path}")

        text = resolved.read_text(encoding="utf-8-sig")
        self._stack.append(resolved)
        try:
            self._evaluate_text(text, resolved, namespace, depth)
        finally:
            self._stack.pop()

    def _evaluate_text(self, text: str, source_path: Path | None, namespace: dict[str, Any], depth: int) -> None:
        filename = str(source_path) if source_path is not None else "<settings>"

        # Phase 1: Parse
        try:
            module = ast.parse(text, filename=filename, mode="exec")
        except SyntaxError as e:
            msg = f"Invalid syntax in {filename} at line {e.lineno}: {e.msg}"
            raise SettingsSyntaxError(msg) from e

        # Phase 2: Validate for security
        validator = _SettingsValidator()
        validator.visit(module)
        if validator.errors:
            msg = f"{filename}: " + "; ".join(validator.errors)
            raise SettingsSecurityError(msg)

        # Phase 3: Evaluate literals
        _SettingsEvaluator(self, source_path, depth).evaluate(module, namespace)
