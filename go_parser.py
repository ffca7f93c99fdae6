import os

import tree_sitter_go as tsgo
from tree_sitter import Language, Parser

from parse_errors import ParseError


GO_LANGUAGE = Language(tsgo.language())


class ParseGoError(ParseError):
    pass


def _first_error_line(root):
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point.row + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def parse_go_source(source, filename="<source>"):
    if isinstance(source, str):
        source = source.encode("utf-8")

    parser = Parser(GO_LANGUAGE)
    tree = parser.parse(source)

    if tree.root_node.has_error:
        base = os.path.basename(filename)
        line = _first_error_line(tree.root_node)
        where = f" near line {line}" if line else ""
        raise ParseGoError(
            f"Could not parse '{base}': syntax error{where}. "
            "Try: gofmt -l <file> to see the parser diagnostics."
        )
    return tree


def parse_go_file(filename):
    if not os.path.exists(filename):
        raise ParseGoError(f"Input file does not exist: {filename}")
    if not os.path.isfile(filename):
        raise ParseGoError(f"Input path is not a file: {filename}")

    with open(filename, "rb") as handle:
        source = handle.read()
    return parse_go_source(source, filename)
