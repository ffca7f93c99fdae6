import logging

from ast_parser import parse_cpp_file
from cpp_tree import build_cpp_unit
from engine_factory import build_engine
from go_parser import parse_go_file
from go_tree import build_go_unit
from nargs_flags import NargsFlags
from parse_errors import ParseError
from source_discovery import collect_sources, language_of


logger = logging.getLogger(__name__)


def load_unit(path):
    language = language_of(path)
    if language == "go":
        return build_go_unit(parse_go_file(path), path)
    if language == "cpp":
        return build_cpp_unit(parse_cpp_file(path), path)
    raise ParseError(f"Unsupported source file: {path}")


def load_units(paths):
    """
    Parses each path on its own; a unit that fails is recorded and skipped
    so the rest of the batch is still analyzed.
    """
    units = []
    errors = []
    for path in paths:
        try:
            units.append(load_unit(path))
        except (ParseError, OSError) as exc:
            logger.error("Failed to parse %s: %s", path, exc)
            errors.append((path, str(exc)))
    return units, errors


def check_units(units, flags=None):
    if flags is None:
        flags = NargsFlags()
    collector = build_engine(flags).run(units)
    results = collector.results()
    return results, bool(results) and flags.set_exit_status


def check_for_unused_function_args(paths, flags=None):
    """
    Parses the files/directories in paths and reports unused function
    parameters.

    Returns (results, exit_with_status, errors): the ordered diagnostic
    lines, whether a non-zero exit status is warranted, and the
    (path, message) pairs of units that could not be parsed.
    """
    if flags is None:
        flags = NargsFlags()

    sources = collect_sources(paths, include_tests=flags.include_tests)
    units, errors = load_units(sources)
    results, exit_with_status = check_units(units, flags)
    return results, exit_with_status, errors
