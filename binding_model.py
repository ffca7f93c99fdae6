PARAMETER = "parameter"
RECEIVER = "receiver"
NAMED_RETURN = "named-return"
CLOSURE_PARAMETER = "closure-parameter"

DISCARD_NAME = "_"


class Binding:
    """
    A trackable declaration and whether anything has read it yet.
    """

    __slots__ = ("identity", "name", "kind", "used")

    def __init__(self, identity, name, kind=PARAMETER):
        self.identity = identity
        self.name = name
        self.kind = kind
        self.used = False

    def __repr__(self):
        state = "used" if self.used else "unused"
        return f"Binding({self.name!r}, {self.kind}, {state})"


class Scope:
    """
    Bindings of one function or closure body, keyed by declaration identity.

    Two bindings sharing a name in different scopes have different
    identities, so lookups never go through the textual name.
    """

    def __init__(self, owner_name, line, file=None):
        self.owner_name = owner_name
        self.line = line
        self.file = file
        self._bindings = {}

    def declare(self, identity, name, kind=PARAMETER):
        if not name or name == DISCARD_NAME or identity is None:
            return None
        binding = self._bindings.get(identity)
        if binding is None:
            binding = Binding(identity, name, kind)
            self._bindings[identity] = binding
        return binding

    def declare_fields(self, fields, kind=PARAMETER):
        for fld in fields or []:
            for name_ident in fld.get("names", []):
                if name_ident is None:
                    continue
                self.declare(name_ident.get("obj"), name_ident.get("name"), kind)

    def mark_used(self, identity):
        binding = self._bindings.get(identity)
        if binding is not None:
            binding.used = True

    def unused(self):
        return [b for b in self._bindings.values() if not b.used]

    def __contains__(self, identity):
        return identity in self._bindings

    def __len__(self):
        return len(self._bindings)

    def __iter__(self):
        return iter(self._bindings.values())
