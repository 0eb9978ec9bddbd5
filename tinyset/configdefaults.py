from tinyset.configparser import (
    EnumStr,
    TinySetConfigParser,
    _create_default_config,
)


def add_set_configvars(config: TinySetConfigParser) -> None:
    config.add(
        "element_coercion",
        "What to do when a set element is not a string. "
        "'str' converts it with str(), 'raise' raises a TypeError.",
        EnumStr("str", ["raise"]),
    )


def create_config(flags_string: str | None = None) -> TinySetConfigParser:
    """Build a config object with every tinyset option registered.

    Options are read from `flags_string`, or from the ``TINYSET_FLAGS``
    environment variable when it is None.
    """
    new_config = _create_default_config(flags_string)
    add_set_configvars(new_config)
    new_config.warn_unused_flags()
    return new_config


# This is the singleton that holds all configuration settings
config = create_config()
