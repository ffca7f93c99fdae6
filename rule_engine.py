import logging

from diagnostic_collector import DiagnosticCollector


logger = logging.getLogger(__name__)


class RuleEngine:
    """
    Applies a collection of rules to the top-level declarations of each
    unit and pools their diagnostics.
    """

    def __init__(self, rules):
        self.rules = rules

    def run(self, units, collector=None):
        if collector is None:
            collector = DiagnosticCollector()

        for unit in units:
            logger.info("Checking %s", unit.get("file"))
            for rule in self.rules:
                rule.begin_unit(unit)

            for node in unit.get("decls", []):
                for rule in self.rules:
                    # Check if the rule applies to this node
                    if rule.matches(node):
                        for diagnostic in rule.apply(node) or []:
                            collector.add(diagnostic)

        for rule in self.rules:
            for diagnostic in rule.finalize() or []:
                collector.add(diagnostic)

        return collector
