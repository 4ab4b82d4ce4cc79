# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Helpers for describing functions, mostly so that transformers and
arbitraries built from lambdas get readable labels."""

import ast
import inspect
import linecache
import textwrap
import types
from functools import partial
from inspect import Parameter
from weakref import WeakKeyDictionary

LAMBDA_DESCRIPTION_CACHE = WeakKeyDictionary()


def extract_all_lambdas(tree):
    lambdas = []

    class Visitor(ast.NodeVisitor):
        def visit_Lambda(self, node):
            lambdas.append(node)

    Visitor().visit(tree)
    return lambdas


def ast_arguments_matches_signature(args, sig):
    expected = []
    for node in args.posonlyargs:
        expected.append((node.arg, Parameter.POSITIONAL_ONLY))
    for node in args.args:
        expected.append((node.arg, Parameter.POSITIONAL_OR_KEYWORD))
    if args.vararg is not None:
        expected.append((args.vararg.arg, Parameter.VAR_POSITIONAL))
    for node in args.kwonlyargs:
        expected.append((node.arg, Parameter.KEYWORD_ONLY))
    if args.kwarg is not None:
        expected.append((args.kwarg.arg, Parameter.VAR_KEYWORD))
    return expected == [(p.name, p.kind) for p in sig.parameters.values()]


def _lambda_description(f):
    sig = inspect.signature(f)

    def format_lambda(body):
        return (
            f"lambda {str(sig)[1:-1]}: {body}" if sig.parameters else f"lambda: {body}"
        )

    if_confused = format_lambda("<unknown>")

    linecache.cache.pop("<string>", None)
    try:
        source_lines, lineno0 = inspect.findsource(f)
    except OSError:
        return if_confused

    local_block = textwrap.dedent("".join(inspect.getblock(source_lines[lineno0:])))
    if local_block.startswith("."):
        # The fairly common ".map(lambda x: ...)" case.
        local_block = local_block[1:]
    try:
        tree = ast.parse(local_block)
    except SyntaxError:
        try:
            tree = ast.parse("".join(source_lines))
        except SyntaxError:
            return if_confused
        offset = 0
    else:
        offset = lineno0

    aligned_sources = {
        format_lambda(ast.unparse(candidate.body))
        for candidate in extract_all_lambdas(tree)
        if candidate.lineno + offset <= lineno0 + 1 <= candidate.end_lineno + offset
        and ast_arguments_matches_signature(candidate.args, sig)
    }
    if len(aligned_sources) == 1:
        return next(iter(aligned_sources))
    return if_confused


def lambda_description(f):
    """Returns an expression describing the lambda ``f``.

    This is usually the source of the lambda as it appears in the file,
    modulo formatting. If the source cannot be located unambiguously the
    body is shown as ``<unknown>``.
    """
    try:
        return LAMBDA_DESCRIPTION_CACHE[f]
    except KeyError:
        pass
    description = _lambda_description(f)
    LAMBDA_DESCRIPTION_CACHE[f] = description
    return description


def get_pretty_function_description(f):
    if isinstance(f, partial):
        args = [get_pretty_function_description(f.func)]
        args.extend(map(repr, f.args))
        args.extend(f"{k}={v!r}" for k, v in f.keywords.items())
        return f"partial({', '.join(args)})"
    if not hasattr(f, "__name__"):
        return repr(f)
    name = f.__name__
    if name == "<lambda>":
        return lambda_description(f)
    elif isinstance(f, (types.MethodType, types.BuiltinMethodType)):
        self = f.__self__
        if not (self is None or inspect.isclass(self) or inspect.ismodule(self)):
            return f"{self!r}.{name}"
    return name
