class ParseError(RuntimeError):
    """
    A source unit could not be turned into a tree; it is not analyzed.
    """
