from collections import namedtuple

from binding_model import DISCARD_NAME


class Diagnostic(namedtuple("Diagnostic", ["file", "line", "func_name", "param_name"])):
    __slots__ = ()

    def __str__(self):
        return f"{self.file}:{self.line} {self.func_name} contains unused parameter {self.param_name}\n"


class DiagnosticCollector:
    """
    Pools findings for one analysis run.

    Traversal order follows the shape of the worklist, not the source, so
    findings are only meaningful once sorted: by file (in the order files
    were first seen) and then by line. Findings on the same line keep the
    order they were added in, which is declaration order within a scope.
    """

    def __init__(self):
        self._diagnostics = []
        self._seen = set()
        self._file_rank = {}

    def add(self, diagnostic):
        if diagnostic.param_name == DISCARD_NAME or diagnostic in self._seen:
            return False
        self._seen.add(diagnostic)
        self._file_rank.setdefault(diagnostic.file, len(self._file_rank))
        self._diagnostics.append(diagnostic)
        return True

    def merge(self, other):
        for diagnostic in other.diagnostics():
            self.add(diagnostic)

    def diagnostics(self):
        indexed = enumerate(self._diagnostics)
        ordered = sorted(
            indexed,
            key=lambda pair: (self._file_rank[pair[1].file], pair[1].line or 0, pair[0]),
        )
        return [d for _, d in ordered]

    def results(self):
        return [str(d) for d in self.diagnostics()]

    def __len__(self):
        return len(self._diagnostics)
