class TinySetConfigWarning(Warning):
    """
    Emitted when TINYSET_FLAGS names an option that is not registered
    """
