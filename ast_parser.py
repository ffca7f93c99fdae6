import os
import sys
import subprocess
from clang import cindex

from parse_errors import ParseError


_LIBRARY_NAMES = ("libclang.dylib", "libclang.so", "libclang.dll")


def _find_libclang():
    env_path = os.environ.get("LIBCLANG_FILE") or os.environ.get("LIBCLANG_PATH")
    if env_path:
        if os.path.isdir(env_path):
            for name in _LIBRARY_NAMES:
                candidate = os.path.join(env_path, name)
                if os.path.exists(candidate):
                    return candidate
        if os.path.isfile(env_path):
            return env_path

    if getattr(sys, "frozen", False):
        base = getattr(sys, "_MEIPASS", None)
        if base:
            for name in _LIBRARY_NAMES:
                for rel in (name, os.path.join("lib", name)):
                    candidate = os.path.join(base, rel)
                    if os.path.exists(candidate):
                        return candidate

    for candidate in (
        "/opt/homebrew/opt/llvm/lib/libclang.dylib",
        "/usr/local/opt/llvm/lib/libclang.dylib",
    ):
        if os.path.exists(candidate):
            return candidate

    # The libclang wheel ships its own library and finds it unaided.
    return None


libclang_path = _find_libclang()
if libclang_path and not cindex.Config.loaded:
    cindex.Config.set_library_file(libclang_path)


class ParseCppError(ParseError):
    pass


def _translation_unit_failure_hint(filename):
    base = os.path.basename(filename)
    return (
        f"Could not parse '{base}'. "
        "This usually means severe syntax errors or missing C++ headers/toolchain paths. "
        "Try: clang++ -std=gnu++17 -fsyntax-only <file> to see compiler diagnostics."
    )


def _sdk_args():
    try:
        sdk_path = subprocess.check_output(
            ["xcrun", "--show-sdk-path"],
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
    except (OSError, subprocess.CalledProcessError):
        return []
    if not sdk_path:
        return []
    return [
        "-isysroot",
        sdk_path,
        "-I",
        os.path.join(sdk_path, "usr/include/c++/v1"),
    ]


def _blocking_errors(translation_unit, target_file):
    errors = []
    for diag in translation_unit.diagnostics:
        if diag.severity < cindex.Diagnostic.Error:
            continue
        loc = diag.location
        loc_file = loc.file.name if loc and loc.file else None
        if loc_file and os.path.realpath(loc_file) != target_file:
            continue
        errors.append((loc.line if loc else None, diag.spelling))
    return errors


def parse_cpp_file(filename, extra_args=None):
    if not os.path.exists(filename):
        raise ParseCppError(f"Input file does not exist: {filename}")
    if not os.path.isfile(filename):
        raise ParseCppError(f"Input path is not a file: {filename}")

    language = "c" if filename.endswith(".c") else "c++"
    standard = "-std=gnu11" if language == "c" else "-std=gnu++17"
    args = ["-x", language, standard] + _sdk_args() + (extra_args or [])
    options = cindex.TranslationUnit.PARSE_DETAILED_PROCESSING_RECORD

    index = cindex.Index.create()
    try:
        translation_unit = index.parse(filename, args=args, options=options)
    except cindex.TranslationUnitLoadError as exc:
        raise ParseCppError(_translation_unit_failure_hint(filename)) from exc

    errors = _blocking_errors(translation_unit, os.path.realpath(filename))
    if errors:
        line, message = errors[0]
        where = f" (line {line})" if line else ""
        raise ParseCppError(f"{_translation_unit_failure_hint(filename)} First error: {message}{where}")

    return translation_unit
