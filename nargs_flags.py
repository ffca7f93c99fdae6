class NargsFlags:
    """
    Options recognized by the unused-parameter check.

    * include_tests - analyze test files as well
    * set_exit_status - exit non-zero when any issue is found
    * include_named_returns - report unused named results
    * include_receivers - report unused method receivers
    """

    def __init__(
        self,
        include_named_returns=False,
        include_receivers=True,
        include_tests=True,
        set_exit_status=True,
    ):
        self.include_named_returns = include_named_returns
        self.include_receivers = include_receivers
        self.include_tests = include_tests
        self.set_exit_status = set_exit_status

    def as_dict(self):
        return {
            "include_named_returns": self.include_named_returns,
            "include_receivers": self.include_receivers,
            "include_tests": self.include_tests,
            "set_exit_status": self.set_exit_status,
        }

    def __repr__(self):
        fields = ", ".join(f"{k}={v}" for k, v in self.as_dict().items())
        return f"NargsFlags({fields})"


# option name -> (attribute, value)
FLAG_OPTIONS = {
    "--named-returns": ("include_named_returns", True),
    "--no-named-returns": ("include_named_returns", False),
    "--receivers": ("include_receivers", True),
    "--no-receivers": ("include_receivers", False),
    "--tests": ("include_tests", True),
    "--no-tests": ("include_tests", False),
    "--set-exit-status": ("set_exit_status", True),
    "--no-set-exit-status": ("set_exit_status", False),
}


def apply_flag_option(flags, option):
    """
    Returns True when option was one of the flag switches.
    """
    if option not in FLAG_OPTIONS:
        return False
    attr, value = FLAG_OPTIONS[option]
    setattr(flags, attr, value)
    return True
