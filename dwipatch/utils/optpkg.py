"""Routines to support optional packages"""

import importlib

from packaging.version import Version

try:
    import pytest
except ImportError:
    have_pytest = False
else:
    have_pytest = True

from dwipatch.utils.tripwire import TripWire


def optional_package(name, *, trip_msg=None, min_version=None):
    """Return package-like thing and module setup for package `name`

    Parameters
    ----------
    name : str
        package name
    trip_msg : None or str
        message to give when someone tries to use the returned package, but
        we could not import it, and have returned a TripWire object instead.
        Default message if None.
    min_version : None or str
        If not None, require that the imported package be at least this
        version.

    Returns
    -------
    pkg_like : module or ``TripWire`` instance
        If we can import the package, return it.  Otherwise return an object
        raising an error when accessed
    have_pkg : bool
        True if import for package was successful, false otherwise
    module_setup : function
        callable usually set as ``setup_module`` in calling namespace, to allow
        skipping tests.

    Examples
    --------
    >>> from dwipatch.utils.optpkg import optional_package
    >>> pkg, have_pkg, setup_module = optional_package('not_a_package')
    >>> have_pkg
    False
    >>> pkg, _, _ = optional_package('os')
    >>> hasattr(pkg, 'path')
    True
    """
    try:
        pkg = importlib.import_module(name)
    except ImportError:
        pass
    else:
        if not min_version:
            return pkg, True, lambda: None

        current_version = getattr(pkg, "__version__", "0.0.0")
        if Version(current_version) >= Version(min_version):
            return pkg, True, lambda: None

        if trip_msg is None:
            trip_msg = (
                f"We need at least version {min_version} of "
                f"package {name}, but ``import {name}`` "
                f"found version {current_version}"
            )

    if trip_msg is None:
        trip_msg = (
            f"We need package {name} for these functions, but "
            f"``import {name}`` raised an ImportError"
        )
    pkg = TripWire(trip_msg)

    def setup_module():
        if have_pytest:
            pytest.mark.skip(f"No {name} for these tests")

    return pkg, False, setup_module
