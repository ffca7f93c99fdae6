from binding_model import CLOSURE_PARAMETER, NAMED_RETURN, PARAMETER, RECEIVER, Scope


def collect_signature(decl, flags):
    """
    Builds the starting scope for a function declaration.

    Returns None for declarations without a body (prototypes, externally
    implemented functions); there is nothing to analyze there.
    """
    if decl.get("body") is None:
        return None

    scope = Scope(decl.get("name") or "anonymous", decl.get("line"), decl.get("file"))
    signature = decl.get("type") or {}

    scope.declare_fields(signature.get("params"), PARAMETER)

    if flags.include_receivers and decl.get("recv"):
        scope.declare_fields(decl["recv"], RECEIVER)

    if flags.include_named_returns:
        scope.declare_fields(signature.get("results"), NAMED_RETURN)

    return scope


def collect_closure_signature(name, literal, file=None):
    """
    Closures only track their own parameters: no receiver, no named results.
    """
    scope = Scope(name, literal.get("line"), file)
    signature = literal.get("type") or {}
    scope.declare_fields(signature.get("params"), CLOSURE_PARAMETER)
    return scope
