import os

from clang.cindex import CursorKind

from syntax_nodes import (
    block,
    decl_stmt,
    expr_stmt,
    field,
    file_unit,
    func_decl,
    func_lit,
    ident,
    node,
    run_conversion,
    value_spec,
)


_FUNC_KINDS = {
    CursorKind.FUNCTION_DECL,
    CursorKind.CXX_METHOD,
    CursorKind.CONSTRUCTOR,
    CursorKind.DESTRUCTOR,
    CursorKind.CONVERSION_FUNCTION,
    CursorKind.FUNCTION_TEMPLATE,
}

_CONTAINER_KINDS = {
    CursorKind.NAMESPACE,
    CursorKind.LINKAGE_SPEC,
    CursorKind.CLASS_DECL,
    CursorKind.STRUCT_DECL,
    CursorKind.UNION_DECL,
    CursorKind.CLASS_TEMPLATE,
}

# Control statements only group their children; usage does not depend on
# which branch a reference sits in.
_CONTROL_KINDS = {
    CursorKind.IF_STMT,
    CursorKind.WHILE_STMT,
    CursorKind.DO_STMT,
    CursorKind.FOR_STMT,
    CursorKind.SWITCH_STMT,
    CursorKind.CXX_FOR_RANGE_STMT,
    CursorKind.CXX_TRY_STMT,
    CursorKind.CXX_CATCH_STMT,
}

_BRANCH_KINDS = {
    CursorKind.GOTO_STMT: "goto",
    CursorKind.BREAK_STMT: "break",
    CursorKind.CONTINUE_STMT: "continue",
}

_LITERAL_KINDS = {
    CursorKind.INTEGER_LITERAL,
    CursorKind.FLOATING_LITERAL,
    CursorKind.IMAGINARY_LITERAL,
    CursorKind.STRING_LITERAL,
    CursorKind.CHARACTER_LITERAL,
    CursorKind.CXX_BOOL_LITERAL_EXPR,
    CursorKind.CXX_NULL_PTR_LITERAL_EXPR,
    CursorKind.CXX_THIS_EXPR,
}

_BINDING_DECL_KINDS = {CursorKind.PARM_DECL, CursorKind.VAR_DECL}


def _identity(cursor):
    loc = cursor.location
    file_name = loc.file.name if loc.file else None
    return (file_name, loc.line, loc.column, cursor.spelling)


def _skipped(cursor):
    # TYPE_REF, NAMESPACE_REF, lambda capture refs, attributes
    return cursor.kind.is_reference() or cursor.kind.is_attribute()


class CppTreeBuilder:
    """
    Converts a libclang translation unit into analysis nodes.

    libclang already resolves every DECL_REF_EXPR to its declaration, so
    the declaration's location doubles as the binding identity. Conversion
    steps are generators driven by run_conversion.
    """

    def __init__(self, filename, target_file=None):
        self.filename = filename
        self.target_file = target_file or os.path.realpath(filename)
        self._realpath_cache = {}

    def build(self, translation_unit):
        decls = []
        pending = list(translation_unit.cursor.get_children())
        while pending:
            cursor = pending.pop(0)
            if not self._in_target(cursor):
                continue
            if cursor.kind in _FUNC_KINDS:
                decls.append(run_conversion(self._func_decl(cursor)))
            elif cursor.kind in _CONTAINER_KINDS:
                pending.extend(cursor.get_children())
            elif cursor.kind == CursorKind.VAR_DECL:
                spec = run_conversion(self._value_spec(cursor))
                decls.append(decl_stmt([spec], cursor.location.line))
        return file_unit(self.filename, decls)

    def _in_target(self, cursor):
        cursor_file = cursor.location.file.name if cursor.location.file else None
        if cursor_file is None:
            return False
        cached = self._realpath_cache.get(cursor_file)
        if cached is None:
            cached = os.path.realpath(cursor_file)
            self._realpath_cache[cursor_file] = cached
        return cached == self.target_file

    def _decl_ident(self, cursor):
        return ident(cursor.spelling, cursor.location.line, _identity(cursor))

    def _func_decl(self, cursor):
        params = []
        preamble = []
        body = None
        for child in cursor.get_children():
            if child.kind == CursorKind.PARM_DECL:
                params.append(field([self._decl_ident(child)]))
            elif child.kind == CursorKind.COMPOUND_STMT:
                body = yield self._block(child)
            elif child.kind.is_expression():
                # constructor initializers: A(int x) : v(x) {}
                preamble.append(expr_stmt((yield self._expr(child)), child.location.line))

        if body is not None and cursor.is_definition():
            body["list"] = preamble + body["list"]
        else:
            body = None

        return func_decl(
            cursor.spelling or "anonymous",
            cursor.location.line,
            self.filename,
            params=params,
            body=body,
        )

    def _value_spec(self, cursor):
        values = []
        for c in cursor.get_children():
            if not _skipped(c):
                values.append((yield self._expr(c)))
        return value_spec([self._decl_ident(cursor)], values, line=cursor.location.line)

    def _block(self, cursor):
        return block((yield self._stmts(cursor.get_children())), cursor.location.line)

    def _stmts(self, cursors):
        stmts = []
        for c in cursors:
            stmts.append((yield self._stmt(c)))
        return stmts

    def _stmt(self, cursor):
        kind = cursor.kind
        line = cursor.location.line
        children = [c for c in cursor.get_children() if not _skipped(c)]

        if kind == CursorKind.COMPOUND_STMT:
            return (yield self._block(cursor))
        if kind == CursorKind.DECL_STMT:
            specs = []
            for c in children:
                if c.kind == CursorKind.VAR_DECL:
                    specs.append((yield self._value_spec(c)))
            return decl_stmt(specs, line)
        if kind == CursorKind.VAR_DECL:
            return decl_stmt([(yield self._value_spec(cursor))], line)
        if kind == CursorKind.RETURN_STMT:
            return node("ReturnStmt", line, results=(yield self._exprs(children)))
        if kind == CursorKind.CASE_STMT:
            values = yield self._exprs(children[:1])
            return node("CaseClause", line, list=values, body=(yield self._stmts(children[1:])))
        if kind == CursorKind.DEFAULT_STMT:
            return node("CaseClause", line, list=[], body=(yield self._stmts(children)))
        if kind == CursorKind.LABEL_STMT:
            stmt = (yield self._stmt(children[0])) if children else None
            return node("LabeledStmt", line, label=ident(cursor.spelling, line), stmt=stmt)
        if kind in _BRANCH_KINDS:
            return node("BranchStmt", line, tok=_BRANCH_KINDS[kind], label=None)
        if kind == CursorKind.NULL_STMT:
            return node("EmptyStmt", line)
        if kind in _CONTROL_KINDS:
            return block((yield self._stmts(children)), line)
        if kind.is_expression():
            return expr_stmt((yield self._expr(cursor)), line)

        return node("cpp:" + kind.name, line)

    def _exprs(self, cursors):
        exprs = []
        for c in cursors:
            exprs.append((yield self._expr(c)))
        return exprs

    def _expr(self, cursor):
        kind = cursor.kind
        line = cursor.location.line

        if kind == CursorKind.DECL_REF_EXPR:
            ref = cursor.referenced
            obj = None
            if ref is not None and ref.kind in _BINDING_DECL_KINDS:
                obj = _identity(ref)
            return ident(cursor.spelling, line, obj)
        if kind in _LITERAL_KINDS:
            return node("BasicLit", line, value=cursor.spelling)
        if kind == CursorKind.LAMBDA_EXPR:
            return (yield self._lambda(cursor))

        children = yield self._exprs(c for c in cursor.get_children() if not _skipped(c))

        if kind == CursorKind.MEMBER_REF_EXPR:
            return node(
                "SelectorExpr",
                line,
                x=children[0] if children else None,
                sel=ident(cursor.spelling, line),
            )
        if kind == CursorKind.CALL_EXPR:
            return node("CallExpr", line, fun=children[0] if children else None, args=children[1:])
        if kind in (CursorKind.BINARY_OPERATOR, CursorKind.COMPOUND_ASSIGNMENT_OPERATOR) and len(children) == 2:
            return node("BinaryExpr", line, x=children[0], y=children[1])
        if kind == CursorKind.UNARY_OPERATOR and len(children) == 1:
            return node("UnaryExpr", line, x=children[0])
        if kind == CursorKind.ARRAY_SUBSCRIPT_EXPR and len(children) == 2:
            return node("IndexExpr", line, x=children[0], index=children[1])
        if kind == CursorKind.CONDITIONAL_OPERATOR and len(children) == 3:
            return node("CondExpr", line, cond=children[0], x=children[1], y=children[2])
        if kind == CursorKind.PAREN_EXPR and len(children) == 1:
            return node("ParenExpr", line, x=children[0])
        if kind == CursorKind.INIT_LIST_EXPR:
            return node("CompositeLit", line, type=None, elts=children)

        if kind.is_expression():
            # casts, implicit conversions, new/delete, sizeof...
            if len(children) == 1:
                return children[0]
            if not children:
                return node("BasicLit", line, value=None)
            return node("CompositeLit", line, type=None, elts=children)
        if kind.is_statement():
            return (yield self._stmt(cursor))
        if kind == CursorKind.VAR_DECL:
            return decl_stmt([(yield self._value_spec(cursor))], line)

        return node("cpp:" + kind.name, line)

    def _lambda(self, cursor):
        params = []
        body = block([], cursor.location.line)
        for child in cursor.get_children():
            if child.kind == CursorKind.PARM_DECL:
                params.append(field([self._decl_ident(child)]))
            elif child.kind == CursorKind.COMPOUND_STMT:
                body = yield self._block(child)
        return func_lit(params, body, cursor.location.line)


def build_cpp_unit(translation_unit, filename):
    return CppTreeBuilder(filename).build(translation_unit)
