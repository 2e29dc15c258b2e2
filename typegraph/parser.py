"""
Tree-sitter syntax diagnostics for header text.

The type graph itself is built by the pattern-based scanner; tree-sitter is
only used to report headers that do not parse cleanly as C/C++, which usually
points at macros or constructs outside the supported struct idiom.
"""

import logging

import tree_sitter_cpp as tscpp
from tree_sitter import Language, Node, Parser, Tree

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
CPP_LANGUAGE = Language(tscpp.language())


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for C/C++ headers.

    Returns:
        A Parser instance configured with the C++ language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"typedef struct { int x; } foo_t;")
    """
    parser = Parser(CPP_LANGUAGE)
    logger.debug("Created tree-sitter C++ parser")
    return parser


def parse_header_text(source_text: str) -> Tree:
    """Parse header text into a syntax tree.

    Args:
        source_text: Header source as a string.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source_text is not a string.
    """
    if not isinstance(source_text, str):
        raise TypeError(f"Source must be str, got {type(source_text).__name__}")

    source = source_text.encode("utf-8")
    tree = create_parser().parse(source)
    logger.debug(f"Parsed {len(source)} bytes of header text")
    return tree


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree."""
    count = 0
    stack: list[Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            count += 1
        stack.extend(node.children)
    return count


def count_syntax_errors(source_text: str) -> int:
    """Parse ``source_text`` and return its number of error nodes."""
    tree = parse_header_text(source_text)
    if not tree.root_node.has_error:
        return 0
    return count_error_nodes(tree)
