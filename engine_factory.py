from nargs_flags import NargsFlags
from rule_engine import RuleEngine
from unused_parameter_rule import UnusedParameterRule


def build_engine(flags=None):
    if flags is None:
        flags = NargsFlags()
    return RuleEngine([UnusedParameterRule(flags)])
