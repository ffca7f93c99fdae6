"""
Node constructors for the tree shape the unused-parameter analysis consumes.

Nodes are plain dicts keyed by "kind" and "line", like the cursor dicts the
rule engine has always passed around. Both source providers (go_tree,
cpp_tree) build these, and tests build them by hand.
"""

LITERAL_KINDS = {"BasicLit"}


def run_conversion(task):
    """
    Runs a conversion generator to completion on an explicit stack.

    A conversion step yields the sub-step whose result it needs next and
    gets that result sent back. Steps never call each other directly, so
    the native stack stays flat however deeply the source nests.
    """
    stack = [task]
    result = None
    while stack:
        try:
            step = stack[-1].send(result)
        except StopIteration as done:
            stack.pop()
            result = done.value
            continue
        stack.append(step)
        result = None
    return result


def node(kind, line=None, **fields):
    result = {"kind": kind, "line": line}
    result.update(fields)
    return result


def ident(name, line=None, obj=None):
    """
    obj is the declaration identity the resolver found for this occurrence,
    or None when the name refers to nothing local (package names, types,
    struct fields).
    """
    return node("Ident", line, name=name, obj=obj)


def field(names, type_expr=None):
    return {"kind": "Field", "names": list(names), "type": type_expr}


def func_type(params=None, results=None, line=None):
    return node("FuncType", line, params=list(params or []), results=list(results or []))


def func_decl(name, line, file, params=None, results=None, recv=None, body=None):
    return node(
        "FuncDecl",
        line,
        name=name,
        file=file,
        recv=recv,
        type=func_type(params, results, line),
        body=body,
    )


def func_lit(params, body, line=None, results=None):
    return node("FuncLit", line, type=func_type(params, results, line), body=body)


def block(stmts, line=None):
    return node("BlockStmt", line, list=list(stmts))


def assign(lhs, rhs, line=None, tok="="):
    return node("AssignStmt", line, lhs=list(lhs), rhs=list(rhs), tok=tok)


def value_spec(names, values=None, type_expr=None, line=None):
    return node("ValueSpec", line, names=list(names), type=type_expr, values=list(values or []))


def decl_stmt(specs, line=None):
    return node("DeclStmt", line, decl=node("GenDecl", line, specs=list(specs)))


def expr_stmt(expr, line=None):
    return node("ExprStmt", line, x=expr)


def call(fun, args=None, line=None):
    return node("CallExpr", line, fun=fun, args=list(args or []))


def file_unit(filename, decls):
    return {"kind": "File", "file": filename, "decls": list(decls)}


def is_func_lit(expr):
    return expr is not None and expr.get("kind") == "FuncLit"
