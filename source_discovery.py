import os


GO_EXTENSIONS = {".go"}
CPP_EXTENSIONS = {".c", ".cc", ".cpp", ".cxx", ".h", ".hh", ".hpp", ".hxx"}
SOURCE_EXTENSIONS = GO_EXTENSIONS | CPP_EXTENSIONS

_SKIPPED_DIRS = {"vendor", "testdata", "node_modules", "__pycache__"}
_RECURSIVE_SUFFIX = "/..."


def language_of(path):
    ext = os.path.splitext(path)[1].lower()
    if ext in GO_EXTENSIONS:
        return "go"
    if ext in CPP_EXTENSIONS:
        return "cpp"
    return None


def is_test_file(path):
    base = os.path.basename(path)
    stem, ext = os.path.splitext(base)
    if ext == ".go":
        return stem.endswith("_test")
    return stem.endswith("_test") or stem.startswith("test_")


def _dir_sources(directory):
    found = []
    for name in sorted(os.listdir(directory)):
        path = os.path.join(directory, name)
        if os.path.isfile(path) and language_of(path):
            found.append(path)
    return found


def _tree_sources(root):
    found = []
    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in _SKIPPED_DIRS and not d.startswith("."))
        for name in sorted(files):
            if language_of(name):
                found.append(os.path.join(current, name))
    return found


def collect_sources(paths, include_tests=True):
    """
    Expands files, directories and `dir/...` patterns into source files.

    A path that names neither an existing file nor a directory is kept as
    is, so the parser reports it as a failed unit instead of it vanishing.
    """
    if not paths:
        paths = ["."]

    sources = []
    for raw in paths:
        if raw == "..." or raw.endswith(_RECURSIVE_SUFFIX):
            root = raw[: -len(_RECURSIVE_SUFFIX)] if raw != "..." else "."
            root = root or "."
            sources.extend(_tree_sources(root))
        elif os.path.isdir(raw):
            sources.extend(_dir_sources(raw))
        else:
            sources.append(raw)

    unique = []
    seen = set()
    for path in sources:
        key = os.path.normpath(path)
        if key in seen:
            continue
        seen.add(key)
        if not include_tests and is_test_file(path):
            continue
        unique.append(path)
    return unique
