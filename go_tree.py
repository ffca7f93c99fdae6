from syntax_nodes import (
    assign,
    block,
    decl_stmt,
    expr_stmt,
    field,
    file_unit,
    func_decl,
    func_lit,
    func_type,
    ident,
    node,
    run_conversion,
    value_spec,
)


_LITERAL_TYPES = {
    "int_literal",
    "float_literal",
    "imaginary_literal",
    "rune_literal",
    "interpreted_string_literal",
    "raw_string_literal",
    "true",
    "false",
    "nil",
    "iota",
}

# Names that never refer to a value declared in a function.
_NAME_ONLY_TYPES = {
    "field_identifier",
    "type_identifier",
    "package_identifier",
    "label_name",
    "blank_identifier",
}

_TYPE_TYPES = {
    "qualified_type",
    "generic_type",
    "pointer_type",
    "array_type",
    "implicit_length_array_type",
    "slice_type",
    "map_type",
    "channel_type",
    "function_type",
    "struct_type",
    "interface_type",
    "parenthesized_type",
    "negated_type",
}

_BRANCH_TYPES = {
    "break_statement",
    "continue_statement",
    "goto_statement",
    "fallthrough_statement",
}


def _line(ts_node):
    return ts_node.start_point.row + 1


def _text(ts_node):
    return ts_node.text.decode("utf-8", errors="ignore")


def _named(ts_node):
    if ts_node is None:
        return []
    return [c for c in ts_node.named_children if c.type != "comment"]


def _flatten_statements(children):
    stmts = []
    for child in children:
        if child.type == "statement_list":
            stmts.extend(_named(child))
        elif child.type != "comment":
            stmts.append(child)
    return stmts


def _clause_statements(case_node):
    # Everything after the ':' of a case/default clause is its body.
    after_colon = []
    seen_colon = False
    for child in case_node.children:
        if not seen_colon:
            seen_colon = child.type == ":"
            continue
        if child.is_named:
            after_colon.append(child)
    return _flatten_statements(after_colon)


def _has_token(ts_node, token):
    return any(c.type == token for c in ts_node.children)


class GoTreeBuilder:
    """
    Converts a tree-sitter Go syntax tree into analysis nodes.

    Resolution happens during conversion: every declaration is given an
    identity (file, line, column, name) in a lexical scope chain and every
    identifier occurrence is stamped with the identity it resolves to.
    Package-level and imported names resolve to nothing.

    Conversion methods are generators driven by run_conversion: a method
    yields the sub-conversion it needs and receives the converted node.
    """

    def __init__(self, filename):
        self.filename = filename
        self._scopes = []

    def build(self, tree):
        decls = []
        self._push()
        for child in _named(tree.root_node):
            kind = child.type
            if kind in ("function_declaration", "method_declaration"):
                decls.append(run_conversion(self._func_decl(child)))
            elif kind in ("var_declaration", "const_declaration"):
                decls.append(run_conversion(self._gen_decl(child)))
        self._pop()
        return file_unit(self.filename, decls)

    # -- scopes --

    def _push(self):
        self._scopes.append({})

    def _pop(self):
        self._scopes.pop()

    def _declare(self, name_node):
        name = _text(name_node)
        line = _line(name_node)
        if name == "_":
            return ident(name, line)
        identity = (self.filename, line, name_node.start_point.column, name)
        self._scopes[-1][name] = identity
        return ident(name, line, identity)

    def _resolve(self, name_node):
        name = _text(name_node)
        for scope in reversed(self._scopes):
            if name in scope:
                return ident(name, _line(name_node), scope[name])
        return ident(name, _line(name_node))

    def _define_list(self, list_node):
        """
        Left side of `:=`: names already declared in the innermost scope
        are assigned to, the rest are new.
        """
        idents = []
        for child in _named(list_node):
            if child.type != "identifier":
                idents.append((yield self._expr(child)))
            elif _text(child) in self._scopes[-1]:
                idents.append(self._resolve(child))
            else:
                idents.append(self._declare(child))
        return idents

    # -- declarations --

    def _func_decl(self, ts_node):
        name_node = ts_node.child_by_field_name("name")
        self._push()
        recv = None
        if ts_node.type == "method_declaration":
            recv = yield self._params(ts_node.child_by_field_name("receiver"))
        params = yield self._params(ts_node.child_by_field_name("parameters"))
        results = yield self._results(ts_node.child_by_field_name("result"))
        body_node = ts_node.child_by_field_name("body")
        body = None
        if body_node is not None:
            body = yield self._block(body_node, new_scope=False)
        self._pop()

        return func_decl(
            _text(name_node) if name_node is not None else "anonymous",
            _line(ts_node),
            self.filename,
            params=params,
            results=results,
            recv=recv,
            body=body,
        )

    def _params(self, list_node, declare=True):
        fields = []
        for child in _named(list_node):
            if child.type not in ("parameter_declaration", "variadic_parameter_declaration"):
                continue
            type_expr = yield self._type(child.child_by_field_name("type"))
            if child.type == "variadic_parameter_declaration":
                type_expr = node("Ellipsis", _line(child), elt=type_expr)
            names = []
            for name_node in child.children_by_field_name("name"):
                if declare:
                    names.append(self._declare(name_node))
                else:
                    names.append(ident(_text(name_node), _line(name_node)))
            fields.append(field(names, type_expr))
        return fields

    def _results(self, result_node, declare=True):
        if result_node is None:
            return []
        if result_node.type == "parameter_list":
            return (yield self._params(result_node, declare))
        return [field([], (yield self._type(result_node)))]

    def _gen_decl(self, ts_node):
        specs = []
        pending = [ts_node]
        while pending:
            current = pending.pop(0)
            for child in _named(current):
                if child.type in ("var_spec", "const_spec"):
                    specs.append((yield self._value_spec(child)))
                elif child.type.endswith("_spec_list"):
                    pending.append(child)
        return decl_stmt(specs, _line(ts_node))

    def _value_spec(self, spec):
        # values are resolved before the names they initialize come into scope
        values = yield self._expr_list(spec.child_by_field_name("value"))
        type_expr = yield self._type(spec.child_by_field_name("type"))
        names = [self._declare(n) for n in spec.children_by_field_name("name")]
        return value_spec(names, values, type_expr, _line(spec))

    def _type_decl(self, ts_node):
        specs = []
        pending = [ts_node]
        while pending:
            current = pending.pop(0)
            for child in _named(current):
                if child.type in ("type_spec", "type_alias"):
                    name_node = child.child_by_field_name("name")
                    specs.append(
                        node(
                            "TypeSpec",
                            _line(child),
                            name=ident(_text(name_node), _line(name_node)) if name_node else None,
                            type=(yield self._type(child.child_by_field_name("type"))),
                        )
                    )
                elif child.type.endswith("_spec_list"):
                    pending.append(child)
        return decl_stmt(specs, _line(ts_node))

    # -- statements --

    def _block(self, block_node, new_scope=True):
        if new_scope:
            self._push()
        stmts = []
        for s in _flatten_statements(_named(block_node)):
            stmts.append((yield self._stmt(s)))
        if new_scope:
            self._pop()
        return block(stmts, _line(block_node))

    def _clause_body(self, case_node):
        stmts = []
        for s in _clause_statements(case_node):
            stmts.append((yield self._stmt(s)))
        return stmts

    def _simple(self, ts_node):
        if ts_node is None:
            return None
        return (yield self._stmt(ts_node))

    def _stmt(self, ts_node):
        kind = ts_node.type
        line = _line(ts_node)

        if kind == "block":
            return (yield self._block(ts_node))
        if kind == "expression_statement":
            return expr_stmt((yield self._expr(_named(ts_node)[0])), line)
        if kind == "send_statement":
            chan = yield self._expr(ts_node.child_by_field_name("channel"))
            value = yield self._expr(ts_node.child_by_field_name("value"))
            return node("SendStmt", line, chan=chan, value=value)
        if kind in ("inc_statement", "dec_statement"):
            tok = "++" if kind == "inc_statement" else "--"
            return node("IncDecStmt", line, x=(yield self._expr(_named(ts_node)[0])), tok=tok)
        if kind == "assignment_statement":
            operator = ts_node.child_by_field_name("operator")
            lhs = yield self._expr_list(ts_node.child_by_field_name("left"))
            rhs = yield self._expr_list(ts_node.child_by_field_name("right"))
            return assign(lhs, rhs, line, tok=_text(operator) if operator is not None else "=")
        if kind == "short_var_declaration":
            rhs = yield self._expr_list(ts_node.child_by_field_name("right"))
            lhs = yield self._define_list(ts_node.child_by_field_name("left"))
            return assign(lhs, rhs, line, tok=":=")
        if kind in ("var_declaration", "const_declaration"):
            return (yield self._gen_decl(ts_node))
        if kind == "type_declaration":
            return (yield self._type_decl(ts_node))
        if kind == "labeled_statement":
            children = _named(ts_node)
            stmt = (yield self._stmt(children[1])) if len(children) > 1 else None
            return node("LabeledStmt", line, label=ident(_text(children[0]), line), stmt=stmt)
        if kind in _BRANCH_TYPES:
            labels = _named(ts_node)
            label = ident(_text(labels[0]), line) if labels else None
            return node("BranchStmt", line, tok=kind.split("_")[0], label=label)
        if kind == "return_statement":
            children = _named(ts_node)
            results = (yield self._expr_list(children[0])) if children else []
            return node("ReturnStmt", line, results=results)
        if kind == "go_statement":
            return node("GoStmt", line, call=(yield self._expr(_named(ts_node)[0])))
        if kind == "defer_statement":
            return node("DeferStmt", line, call=(yield self._expr(_named(ts_node)[0])))
        if kind == "if_statement":
            return (yield self._if(ts_node))
        if kind == "for_statement":
            return (yield self._for(ts_node))
        if kind == "expression_switch_statement":
            return (yield self._switch(ts_node))
        if kind == "type_switch_statement":
            return (yield self._type_switch(ts_node))
        if kind == "select_statement":
            return (yield self._select(ts_node))
        if kind == "empty_statement":
            return node("EmptyStmt", line)

        return expr_stmt((yield self._expr(ts_node)), line)

    def _if(self, ts_node):
        self._push()
        init = yield self._simple(ts_node.child_by_field_name("initializer"))
        cond = yield self._expr(ts_node.child_by_field_name("condition"))
        body = yield self._block(ts_node.child_by_field_name("consequence"))
        alternative = ts_node.child_by_field_name("alternative")
        else_stmt = (yield self._stmt(alternative)) if alternative is not None else None
        self._pop()
        return node("IfStmt", _line(ts_node), init=init, cond=cond, body=body, **{"else": else_stmt})

    def _for(self, ts_node):
        line = _line(ts_node)
        body_node = ts_node.child_by_field_name("body")
        header = None
        for child in _named(ts_node):
            if child.type != "block":
                header = child
                break

        self._push()
        if header is not None and header.type == "range_clause":
            x = yield self._expr(header.child_by_field_name("right"))
            left = header.child_by_field_name("left")
            define = _has_token(header, ":=")
            targets = []
            if left is not None:
                targets = yield (self._define_list(left) if define else self._expr_list(left))
            result = node(
                "RangeStmt",
                line,
                key=targets[0] if targets else None,
                value=targets[1] if len(targets) > 1 else None,
                tok=":=" if define else "=",
                x=x,
                body=(yield self._block(body_node)),
            )
        elif header is not None and header.type == "for_clause":
            init = yield self._simple(header.child_by_field_name("initializer"))
            cond = yield self._expr(header.child_by_field_name("condition"))
            post = yield self._simple(header.child_by_field_name("update"))
            body = yield self._block(body_node)
            result = node("ForStmt", line, init=init, cond=cond, post=post, body=body)
        else:
            cond = (yield self._expr(header)) if header is not None else None
            body = yield self._block(body_node)
            result = node("ForStmt", line, init=None, cond=cond, post=None, body=body)
        self._pop()
        return result

    def _switch(self, ts_node):
        self._push()
        init = yield self._simple(ts_node.child_by_field_name("initializer"))
        tag = yield self._expr(ts_node.child_by_field_name("value"))
        clauses = []
        for child in _named(ts_node):
            if child.type == "expression_case":
                self._push()
                values = yield self._expr_list(child.child_by_field_name("value"))
                body = yield self._clause_body(child)
                clauses.append(node("CaseClause", _line(child), list=values, body=body))
                self._pop()
            elif child.type == "default_case":
                self._push()
                body = yield self._clause_body(child)
                clauses.append(node("CaseClause", _line(child), list=[], body=body))
                self._pop()
        self._pop()
        return node("SwitchStmt", _line(ts_node), init=init, tag=tag, body=block(clauses, _line(ts_node)))

    def _type_switch(self, ts_node):
        line = _line(ts_node)
        self._push()
        init = yield self._simple(ts_node.child_by_field_name("initializer"))
        value = yield self._expr(ts_node.child_by_field_name("value"))
        assertion = node("TypeAssertExpr", line, x=value, type=None)
        alias = ts_node.child_by_field_name("alias")
        if alias is not None:
            aliases = [self._declare(c) for c in _named(alias) if c.type == "identifier"]
            guard = assign(aliases, [assertion], line, tok=":=")
        else:
            guard = expr_stmt(assertion, line)

        clauses = []
        for child in _named(ts_node):
            if child.type == "type_case":
                self._push()
                types = []
                for t in child.children_by_field_name("type"):
                    types.append((yield self._type(t)))
                body = yield self._clause_body(child)
                clauses.append(node("CaseClause", _line(child), list=types, body=body))
                self._pop()
            elif child.type == "default_case":
                self._push()
                body = yield self._clause_body(child)
                clauses.append(node("CaseClause", _line(child), list=[], body=body))
                self._pop()
        self._pop()
        return node("TypeSwitchStmt", line, init=init, assign=guard, body=block(clauses, line))

    def _select(self, ts_node):
        clauses = []
        for child in _named(ts_node):
            if child.type == "communication_case":
                self._push()
                comm = yield self._comm(child.child_by_field_name("communication"))
                body = yield self._clause_body(child)
                clauses.append(node("CommClause", _line(child), comm=comm, body=body))
                self._pop()
            elif child.type == "default_case":
                self._push()
                body = yield self._clause_body(child)
                clauses.append(node("CommClause", _line(child), comm=None, body=body))
                self._pop()
        return node("SelectStmt", _line(ts_node), body=block(clauses, _line(ts_node)))

    def _comm(self, ts_node):
        if ts_node is None:
            return None
        if ts_node.type != "receive_statement":
            return (yield self._stmt(ts_node))

        line = _line(ts_node)
        right = yield self._expr(ts_node.child_by_field_name("right"))
        left = ts_node.child_by_field_name("left")
        if left is None:
            return expr_stmt(right, line)
        if _has_token(ts_node, ":="):
            return assign((yield self._define_list(left)), [right], line, tok=":=")
        return assign((yield self._expr_list(left)), [right], line)

    # -- expressions --

    def _expr_list(self, ts_node):
        if ts_node is None:
            return []
        if ts_node.type != "expression_list":
            return [(yield self._expr(ts_node))]
        exprs = []
        for c in _named(ts_node):
            exprs.append((yield self._expr(c)))
        return exprs

    def _expr(self, ts_node):
        if ts_node is None:
            return None

        kind = ts_node.type
        line = _line(ts_node)

        if kind == "identifier":
            return self._resolve(ts_node)
        if kind in _NAME_ONLY_TYPES:
            return ident(_text(ts_node), line)
        if kind in _LITERAL_TYPES:
            return node("BasicLit", line, value=_text(ts_node))
        if kind == "parenthesized_expression":
            return node("ParenExpr", line, x=(yield self._expr(_named(ts_node)[0])))
        if kind == "call_expression":
            fun = yield self._expr(ts_node.child_by_field_name("function"))
            args = []
            for a in _named(ts_node.child_by_field_name("arguments")):
                args.append((yield self._expr(a)))
            return node("CallExpr", line, fun=fun, args=args)
        if kind == "variadic_argument":
            return node("Ellipsis", line, elt=(yield self._expr(_named(ts_node)[0])))
        if kind == "selector_expression":
            sel = ts_node.child_by_field_name("field")
            return node(
                "SelectorExpr",
                line,
                x=(yield self._expr(ts_node.child_by_field_name("operand"))),
                sel=ident(_text(sel), _line(sel)) if sel is not None else None,
            )
        if kind == "index_expression":
            x = yield self._expr(ts_node.child_by_field_name("operand"))
            index = yield self._expr(ts_node.child_by_field_name("index"))
            return node("IndexExpr", line, x=x, index=index)
        if kind == "slice_expression":
            x = yield self._expr(ts_node.child_by_field_name("operand"))
            low = yield self._expr(ts_node.child_by_field_name("start"))
            high = yield self._expr(ts_node.child_by_field_name("end"))
            cap = yield self._expr(ts_node.child_by_field_name("capacity"))
            return node("SliceExpr", line, x=x, low=low, high=high, max=cap)
        if kind == "type_assertion_expression":
            x = yield self._expr(ts_node.child_by_field_name("operand"))
            type_expr = yield self._type(ts_node.child_by_field_name("type"))
            return node("TypeAssertExpr", line, x=x, type=type_expr)
        if kind == "type_conversion_expression":
            fun = yield self._type(ts_node.child_by_field_name("type"))
            operand = yield self._expr(ts_node.child_by_field_name("operand"))
            return node("CallExpr", line, fun=fun, args=[operand])
        if kind == "unary_expression":
            operator = ts_node.child_by_field_name("operator")
            return node(
                "UnaryExpr",
                line,
                op=_text(operator) if operator is not None else None,
                x=(yield self._expr(ts_node.child_by_field_name("operand"))),
            )
        if kind == "binary_expression":
            operator = ts_node.child_by_field_name("operator")
            x = yield self._expr(ts_node.child_by_field_name("left"))
            y = yield self._expr(ts_node.child_by_field_name("right"))
            return node("BinaryExpr", line, x=x, op=_text(operator) if operator is not None else None, y=y)
        if kind == "composite_literal":
            type_node = ts_node.child_by_field_name("type")
            # Only a visible struct type makes keys field names; named types
            # may be maps, so their keys are resolved like any expression.
            keys_are_fields = type_node is not None and type_node.type == "struct_type"
            type_expr = yield self._type(type_node)
            elts = yield self._literal_value(ts_node.child_by_field_name("body"), keys_are_fields)
            return node("CompositeLit", line, type=type_expr, elts=elts)
        if kind == "literal_value":
            return node("CompositeLit", line, type=None, elts=(yield self._literal_value(ts_node, False)))
        if kind == "func_literal":
            return (yield self._func_lit(ts_node))
        if kind in _TYPE_TYPES:
            return (yield self._type(ts_node))

        return node("go:" + kind, line)

    def _literal_value(self, ts_node, keys_are_fields):
        elts = []
        for child in _named(ts_node):
            if child.type == "keyed_element":
                parts = _named(child)
                key = yield self._element(parts[0], keys_are_fields)
                value = yield self._element(parts[-1])
                elts.append(node("KeyValueExpr", _line(child), key=key, value=value))
            else:
                elts.append((yield self._element(child)))
        return elts

    def _element(self, ts_node, as_field_name=False):
        inner = ts_node
        if ts_node.type == "literal_element":
            inner = _named(ts_node)[0]
        if inner.type in ("identifier", "field_identifier"):
            if as_field_name:
                return ident(_text(inner), _line(inner))
            return self._resolve(inner)
        return (yield self._expr(inner))

    def _func_lit(self, ts_node):
        self._push()
        params = yield self._params(ts_node.child_by_field_name("parameters"))
        results = yield self._results(ts_node.child_by_field_name("result"))
        body = yield self._block(ts_node.child_by_field_name("body"), new_scope=False)
        self._pop()
        return func_lit(params, body, _line(ts_node), results)

    def _type(self, ts_node):
        if ts_node is None:
            return None

        kind = ts_node.type
        line = _line(ts_node)
        children = _named(ts_node)

        if kind == "qualified_type":
            package = ts_node.child_by_field_name("package")
            name = ts_node.child_by_field_name("name")
            return node(
                "SelectorExpr",
                line,
                x=ident(_text(package), line) if package is not None else None,
                sel=ident(_text(name), line) if name is not None else None,
            )
        if kind == "generic_type":
            return (yield self._type(ts_node.child_by_field_name("type")))
        if kind in ("pointer_type", "parenthesized_type", "negated_type"):
            return node("StarExpr", line, x=(yield self._type(children[0])) if children else None)
        if kind == "array_type":
            length = yield self._expr(ts_node.child_by_field_name("length"))
            elt = yield self._type(ts_node.child_by_field_name("element"))
            return node("ArrayType", line, len=length, elt=elt)
        if kind in ("slice_type", "implicit_length_array_type"):
            return node("ArrayType", line, len=None, elt=(yield self._type(ts_node.child_by_field_name("element"))))
        if kind == "map_type":
            key = yield self._type(ts_node.child_by_field_name("key"))
            value = yield self._type(ts_node.child_by_field_name("value"))
            return node("MapType", line, key=key, value=value)
        if kind == "channel_type":
            return node("ChanType", line, value=(yield self._type(ts_node.child_by_field_name("value"))))
        if kind == "function_type":
            params = yield self._params(ts_node.child_by_field_name("parameters"), declare=False)
            results = yield self._results(ts_node.child_by_field_name("result"), declare=False)
            return func_type(params, results, line)
        if kind == "struct_type":
            return node("StructType", line, fields=(yield self._struct_fields(ts_node)))
        if kind == "interface_type":
            return node("InterfaceType", line, methods=(yield self._interface_methods(ts_node)))

        return ident(_text(ts_node), line)

    def _struct_fields(self, ts_node):
        fields = []
        for decl_list in _named(ts_node):
            for member in _named(decl_list):
                if member.type != "field_declaration":
                    continue
                names = [ident(_text(n), _line(n)) for n in member.children_by_field_name("name")]
                fields.append(field(names, (yield self._type(member.child_by_field_name("type")))))
        return fields

    def _interface_methods(self, ts_node):
        methods = []
        for member in _named(ts_node):
            if member.type in ("method_elem", "method_spec"):
                name = member.child_by_field_name("name")
                params = yield self._params(member.child_by_field_name("parameters"), declare=False)
                results = yield self._results(member.child_by_field_name("result"), declare=False)
                names = [ident(_text(name), _line(name))] if name is not None else []
                methods.append(field(names, func_type(params, results, _line(member))))
            else:
                methods.append(field([], (yield self._type(member))))
        return methods


def build_go_unit(tree, filename):
    return GoTreeBuilder(filename).build(tree)
