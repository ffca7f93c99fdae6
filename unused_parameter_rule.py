from base_rule import BaseRule
from binding_model import Scope
from diagnostic_collector import Diagnostic
from signature_collector import collect_signature
from worklist_walker import WorklistWalker


class UnusedParameterRule(BaseRule):
    """
    Reports function parameters, receivers, named results and closure
    parameters that are never referenced.
    """

    def __init__(self, flags, walker=None):
        self.flags = flags
        self.walker = walker or WorklistWalker()
        self.unit = None

    def matches(self, node):
        kind = node.get("kind")
        if kind == "FuncDecl":
            return node.get("body") is not None
        # package-level `var f = func(...) {...}` still binds closures
        return kind == "DeclStmt"

    def apply(self, node):
        if node.get("kind") == "FuncDecl":
            scope = collect_signature(node, self.flags)
            if scope is None:
                return []
            if scope.file is None:
                scope.file = self._file()
            scopes = [scope] + self.walker.walk(scope, node["body"].get("list"))
        else:
            file_scope = Scope("<file>", node.get("line"), self._file())
            scopes = self.walker.walk(file_scope, [node])

        return [
            Diagnostic(scope.file, scope.line, scope.owner_name, binding.name)
            for scope in scopes
            for binding in scope.unused()
        ]

    def _file(self):
        if self.unit is None:
            return None
        return self.unit.get("file")
