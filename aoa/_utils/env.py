"""
Helpers for reading typed configuration values out of environment variables.
"""

import os
from typing import (
    Any,
    Type,
    Union,
)


class empty:
    """
    Sentinel for "no default given".  ``None`` cannot play this role since it
    is a legitimate default value.
    """


def get_env_value(name: str, required: bool = False, default: Any = empty) -> Any:
    """
    Look up ``name`` in the environment.

    ``required`` and ``default`` are mutually exclusive.  When neither is
    given and the variable is unset, the ``empty`` sentinel is returned so
    that the typed helpers below can decide what to do.
    """
    if required and default is not empty:
        raise ValueError("Using `default` with `required=True` is invalid")
    elif required:
        try:
            value = os.environ[name]
        except KeyError:
            raise KeyError(f"Must set environment variable {name}")
    else:
        value = os.environ.get(name, default)
    return value


def env_int(
    name: str, required: bool = False, default: Union[Type[empty], int] = empty
) -> int:
    """
    Read ``name`` from the environment as an integer.  Values prefixed with
    ``0x`` are parsed as hexadecimal.

    :param name: The environment variable to read
    :param required: Raise ``KeyError`` if the variable is missing
    :param default: Returned when the variable is missing
    """
    value = get_env_value(name, required=required, default=default)
    if value is empty:
        raise ValueError(
            "`env_int` requires either a default value to be specified, or for "
            "the variable to be present in the environment"
        )
    elif isinstance(value, int):
        return value
    return int(value, 0)
