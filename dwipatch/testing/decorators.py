"""
Decorators for dwipatch functions and tests
"""

from functools import wraps
import inspect
from inspect import Parameter, signature
import warnings

import numpy as np
from packaging import version

import dwipatch


def set_random_number_generator(seed_v=1234):
    """Decorator to use a fixed value for the random generator seed.

    The decorated test receives a ``numpy.random.Generator`` as its ``rng``
    keyword argument, which makes the tests that use random data reproducible.

    """

    def _set_random_number_generator(func):
        @wraps(func)
        def _set_random_number_generator_wrapper(*args, **kwargs):
            kwargs["rng"] = np.random.default_rng(seed_v)
            return func(*args, **kwargs)

        # pytest must not try to resolve ``rng`` as a fixture
        params = [
            p for name, p in signature(func).parameters.items() if name != "rng"
        ]
        _set_random_number_generator_wrapper.__signature__ = inspect.Signature(params)
        return _set_random_number_generator_wrapper

    return _set_random_number_generator


def _positional_to_keyword(func, args, kwargs):
    """Split ``args`` into what `func` accepts positionally and the rest.

    Returns the positional arguments, the merged keyword arguments and the
    names of keyword-only parameters that were passed positionally.
    """
    params = signature(func).parameters
    max_positional_args = sum(
        1
        for param in params.values()
        if param.kind in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)
    )
    if len(args) <= max_positional_args:
        return args, kwargs, []

    corrected_kwargs = dict(kwargs)
    moved = []
    for param, arg in zip(
        list(params.values())[max_positional_args:], args[max_positional_args:]
    ):
        corrected_kwargs[param.name] = arg
        moved.append(param.name)
    return args[:max_positional_args], corrected_kwargs, moved


def warning_for_keywords(from_version="0.3.0", until_version="1.0.0"):
    """
    Decorator accepting keyword-only arguments passed positionally, with a
    warning, while the package version lies in ``[from_version,
    until_version]``.

    Outside of that range the call is forwarded untouched, so passing
    keyword-only arguments positionally raises the usual TypeError.

    Parameters
    ----------
    from_version : str, optional
        The version from which the warning should start.
    until_version : str, optional
        The version until which positional use is tolerated.

    Returns
    -------
    function
        The wrapped function.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            current_version = version.parse(dwipatch.__version__).base_version
            in_range = (
                version.parse(from_version)
                <= version.parse(current_version)
                <= version.parse(until_version)
            )
            if not in_range:
                return func(*args, **kwargs)

            args, kwargs, moved = _positional_to_keyword(func, args, kwargs)
            if moved:
                warnings.warn(
                    f"Pass {moved} as keyword args. From version "
                    f"{until_version} passing these as positional arguments "
                    "will result in an error. ",
                    UserWarning,
                    stacklevel=2,
                )
            return func(*args, **kwargs)

        return wrapper

    return decorator
