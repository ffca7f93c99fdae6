from signature_collector import collect_closure_signature
from syntax_nodes import is_func_lit


def closure_pairs(names, values):
    """
    Splits a binding statement into (name, function literal) pairs and the
    remaining value expressions. Only one-to-one bindings of a plain
    identifier to a literal qualify; `a, b := f()` binds no closure.
    """
    pairs = []
    rest = []
    if len(names) != len(values):
        return pairs, list(values)

    for name, value in zip(names, values):
        if name is not None and name.get("kind") == "Ident" and is_func_lit(value):
            pairs.append((name, value))
        else:
            rest.append(value)
    return pairs, rest


def bind_closure(name_ident, literal, enclosing_scope, queue):
    """
    Schedules both passes over a closure body and returns the closure's own
    scope, which can only be judged once the queue has drained.

    The first pass pairs each body statement with a fresh scope holding
    only the literal's parameters. The second pairs the same statements with
    the enclosing scope so captured outer bindings still count as used.
    The two scopes never see each other's marks.
    """
    child = collect_closure_signature(name_ident.get("name"), literal, enclosing_scope.file)
    body = literal.get("body") or {}
    stmts = body.get("list") or []

    for stmt in stmts:
        queue.append((child, stmt))
    for stmt in stmts:
        queue.append((enclosing_scope, stmt))
    queue.append((enclosing_scope, literal.get("type")))

    return child
