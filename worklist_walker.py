import logging
from collections import deque

from closure_capture import bind_closure, closure_pairs
from syntax_nodes import LITERAL_KINDS


logger = logging.getLogger(__name__)


class WorklistWalker:
    """
    Marks bindings used by visiting every expression reachable from a body.

    Nested statements and expressions are flattened into a single queue of
    (scope, node) items instead of being visited recursively, so native
    stack depth stays constant however deeply the source nests. Each item
    is taken off the queue exactly once and replaced by its children.
    """

    # kind -> attributes holding child nodes (or lists of them)
    _CHILD_FIELDS = {
        "BlockStmt": ("list",),
        "IfStmt": ("init", "cond", "body", "else"),
        "ReturnStmt": ("results",),
        "DeclStmt": ("decl",),
        "GenDecl": ("specs",),
        "TypeSpec": ("name", "type"),
        "ExprStmt": ("x",),
        "RangeStmt": ("key", "value", "x", "body"),
        "ForStmt": ("init", "cond", "post", "body"),
        "SwitchStmt": ("init", "tag", "body"),
        "TypeSwitchStmt": ("init", "assign", "body"),
        "CaseClause": ("list", "body"),
        "SelectStmt": ("body",),
        "CommClause": ("comm", "body"),
        "SendStmt": ("chan", "value"),
        "GoStmt": ("call",),
        "DeferStmt": ("call",),
        "BranchStmt": ("label",),
        "LabeledStmt": ("label", "stmt"),
        "IncDecStmt": ("x",),
        "EmptyStmt": (),
        "BinaryExpr": ("x", "y"),
        "UnaryExpr": ("x",),
        "StarExpr": ("x",),
        "ParenExpr": ("x",),
        "CallExpr": ("args", "fun"),
        "IndexExpr": ("x", "index"),
        "SliceExpr": ("low", "high", "max", "x"),
        "KeyValueExpr": ("key", "value"),
        "TypeAssertExpr": ("x", "type"),
        "FuncLit": ("type", "body"),
        "CompositeLit": ("elts",),
        "CondExpr": ("cond", "x", "y"),
        "ArrayType": ("elt", "len"),
        "ChanType": ("value",),
        "MapType": ("key", "value"),
        "Ellipsis": ("elt",),
    }

    # Shape declarations: only the field types can reference a binding.
    _FIELD_LIST_FIELDS = {
        "FuncType": ("params", "results"),
        "InterfaceType": ("methods",),
        "StructType": ("fields",),
    }

    def __init__(self):
        self._reported_kinds = set()

    def walk(self, scope, stmts):
        """
        Walks stmts against scope. Returns the scopes of every closure bound
        to a name along the way; their unused parameters are only final
        once this call returns.
        """
        closures = []
        queue = deque((scope, stmt) for stmt in stmts or [])

        while queue:
            item_scope, item = queue.popleft()
            if item is None:
                continue

            kind = item.get("kind")

            if kind == "Ident":
                item_scope.mark_used(item.get("obj"))
            elif kind == "SelectorExpr":
                queue.append((item_scope, item.get("x")))
                sel = item.get("sel")
                if sel is not None:
                    item_scope.mark_used(sel.get("obj"))
            elif kind == "AssignStmt":
                self._bind(item_scope, item.get("lhs") or [], item.get("rhs") or [], queue, closures)
            elif kind == "ValueSpec":
                queue.append((item_scope, item.get("type")))
                self._bind(item_scope, item.get("names") or [], item.get("values") or [], queue, closures)
            elif kind in LITERAL_KINDS:
                continue
            elif kind in self._FIELD_LIST_FIELDS:
                for attr in self._FIELD_LIST_FIELDS[kind]:
                    for fld in item.get(attr) or []:
                        queue.append((item_scope, fld.get("type")))
            elif kind in self._CHILD_FIELDS:
                self._enqueue_children(item_scope, item, self._CHILD_FIELDS[kind], queue)
            else:
                self._report_unknown(kind, item)

        return closures

    def _bind(self, scope, names, values, queue, closures):
        for name in names:
            queue.append((scope, name))

        pairs, rest = closure_pairs(names, values)
        for name, literal in pairs:
            closures.append(bind_closure(name, literal, scope, queue))
        for value in rest:
            queue.append((scope, value))

    @staticmethod
    def _enqueue_children(scope, item, attrs, queue):
        for attr in attrs:
            child = item.get(attr)
            if child is None:
                continue
            if isinstance(child, list):
                queue.extend((scope, c) for c in child)
            else:
                queue.append((scope, child))

    def _report_unknown(self, kind, item):
        if kind in self._reported_kinds:
            return
        self._reported_kinds.add(kind)
        logger.warning("ERROR: unknown node kind %s (line %s)", kind, item.get("line"))
