class BaseRule:
    def begin_unit(self, unit):
        """
        Called once per analyzed file, before any of its declarations.
        """
        self.unit = unit

    def matches(self, node):
        raise NotImplementedError("matches() must be implemented")

    def apply(self, node):
        raise NotImplementedError("apply() must be implemented")

    def finalize(self):
        """
        Optional hook for rules that report only after every unit was seen.
        """
        return []
