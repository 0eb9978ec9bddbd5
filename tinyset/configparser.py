import logging
import os
import warnings
from collections.abc import Callable, Sequence
from functools import wraps

from tinyset.exceptions import TinySetConfigWarning


_logger = logging.getLogger("tinyset.configparser")


def parse_config_string(config_string: str) -> dict[str, str]:
    """Parse a comma-separated ``key=value`` string into a dictionary.

    Empty entries are skipped and a key without a value maps to ``"True"``.
    """
    config_dict = {}
    for kv_pair in config_string.split(","):
        kv_pair = kv_pair.strip()
        if not kv_pair:
            continue
        kv_tuple = kv_pair.split("=", 1)
        if len(kv_tuple) == 1:
            config_dict[kv_tuple[0].strip()] = "True"
        else:
            k, v = kv_tuple
            config_dict[k.strip()] = v.strip()
    return config_dict


class ConfigParam:
    """Base class of all kinds of configuration parameters.

    A ConfigParam reads and writes its value through the
    `TinySetConfigParser` instance that holds it.
    """

    def __init__(self, default, *, apply: Callable | None = None):
        self._default = default
        self._apply = apply
        # set by TinySetConfigParser.add
        self.name = None
        self.doc = None

    @property
    def default(self):
        return self._default

    def apply(self, value):
        """Applies modifications to a parameter value during assignment."""
        if self._apply:
            return self._apply(value)
        return value

    def __get__(self, cls, type_):
        if cls is None:
            return self
        return cls._values.get(self.name, self.default)

    def __set__(self, cls, val):
        cls._values[self.name] = self.apply(val)


class EnumStr(ConfigParam):
    def __init__(self, default: str, options: Sequence[str]):
        """Creates a str-based parameter that takes a predefined set of options.

        Parameters
        ----------
        default : str
            The default setting.
        options : sequence
            Further str values that the parameter may take.
            May, but does not need to include the default.
        """
        self.all = {default, *options}

        # All options should be strings
        for val in self.all:
            if not isinstance(val, str):
                raise ValueError(f"Non-str value '{val}' for an EnumStr parameter.")
        super().__init__(default, apply=self._apply)

    def _apply(self, val):
        if val in self.all:
            return val
        raise ValueError(
            f"Invalid value ('{val}') for configuration variable '{self.name}'. "
            f"Valid options are {self.all}"
        )


class TinySetConfigParser:
    """Object that holds configuration settings."""

    def __init__(self, flags_dict: dict | None = None):
        # user-given flags, kept apart from the values of registered options
        self._flags_dict = dict(flags_dict or {})
        self._values: dict = {}
        self._config_var_dict: dict[str, ConfigParam] = {}

    def __str__(self):
        return "\n".join(
            f"{name} ({type(param).__name__})\n"
            f"    Doc:  {param.doc}\n"
            f"    Value:  {getattr(self, name)}\n"
            for name, param in self._config_var_dict.items()
        )

    def add(self, name: str, doc: str, configparam: ConfigParam):
        """Add a new variable to TinySetConfigParser.

        A value given in the flags dictionary overrides the default and is
        validated immediately.

        Parameters
        ----------
        name: string
            The full name for this configuration variable.
        doc: string
            What does this variable specify?
        configparam: ConfigParam
            An object for getting and setting this configuration parameter.
        """
        if name in self._config_var_dict:
            raise AttributeError(f"This name is already taken: {name}")
        configparam.doc = doc
        configparam.name = name
        # Apply a value given through TINYSET_FLAGS right away, so that a
        # wrong value from the user fails at import time.
        if name in self._flags_dict:
            val = self._flags_dict[name]
            configparam.__set__(self, val)
            _logger.debug(f"Config option {name} set to {val!r} from flags")
        # Descriptors live on the class; each parser gets its own subclass
        setattr(type(self), name, configparam)
        self._config_var_dict[name] = configparam

    def unknown_flags(self) -> list[str]:
        return [key for key in self._flags_dict if key not in self._config_var_dict]

    def warn_unused_flags(self):
        for key in self.unknown_flags():
            warnings.warn(f"TINYSET_FLAGS: unknown option {key!r}", TinySetConfigWarning)

    def __setattr__(self, attr, val):
        if attr.startswith("_") or hasattr(type(self), attr):
            super().__setattr__(attr, val)
        else:
            raise AttributeError(
                f"Variable {attr} does not exist and cannot be set as a config option"
            )

    def change_flags(self, *args, **kwargs) -> "_ChangeFlagsDecorator":
        """
        Use this as a decorator or context manager to change the value of
        config variables temporarily.

        Useful during tests.
        """
        return _ChangeFlagsDecorator(*args, _root=self, **kwargs)


class _ChangeFlagsDecorator:
    def __init__(self, *args, _root=None, **kwargs):
        # a dict may be passed as the single positional argument
        if args:
            assert len(args) == 1 and isinstance(args[0], dict)
            kwargs = dict(**args[0], **kwargs)
        self.confs = {k: _root._config_var_dict[k] for k in kwargs}
        self.new_vals = kwargs
        self._root = _root
        # one entry per active `with`, so nested or recursive use restores
        # the values each level saw on entry
        self._saved: list[dict] = []

    def __call__(self, f):
        @wraps(f)
        def res(*args, **kwargs):
            with self:
                return f(*args, **kwargs)

        return res

    def __enter__(self):
        old_vals = {
            k: v.__get__(self._root, type(self._root)) for k, v in self.confs.items()
        }
        self._saved.append(old_vals)
        try:
            for k, v in self.confs.items():
                v.__set__(self._root, self.new_vals[k])
        except Exception:
            _logger.error(f"Failed to change flags for {self.confs}.")
            self.__exit__()
            raise

    def __exit__(self, *args):
        old_vals = self._saved.pop()
        for k, v in self.confs.items():
            v.__set__(self._root, old_vals[k])


def _create_default_config(flags_string: str | None = None) -> TinySetConfigParser:
    if flags_string is None:
        flags_string = os.getenv("TINYSET_FLAGS", "")
    flags = parse_config_string(flags_string)
    # A fresh subclass so descriptors registered on one parser do not leak
    # into another
    parser_class = type("TinySetConfigParser", (TinySetConfigParser,), {})
    return parser_class(flags)
