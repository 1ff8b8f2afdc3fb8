import pytest

from dwipatch.testing import assert_false, assert_true
from dwipatch.utils.optpkg import optional_package
from dwipatch.utils.tripwire import TripWireError


def test_optional_package():
    pkg, have_pkg, setup_module = optional_package("os")
    assert_true(have_pkg)
    assert_true(hasattr(pkg, "path"))

    pkg, have_pkg, setup_module = optional_package("not_a_package")
    assert_false(have_pkg)
    with pytest.raises(TripWireError):
        pkg.some_function()

    pkg, have_pkg, setup_module = optional_package("dwipatch", min_version="10.0.0")
    assert_false(have_pkg)
    with pytest.raises(TripWireError, match="at least version 10.0.0"):
        pkg.some_function()

    pkg, have_pkg, setup_module = optional_package("numpy", min_version="1.0.0")
    assert_true(have_pkg)


def test_optional_package_message():
    pkg, have_pkg, _ = optional_package("not_a_package", trip_msg="install it")
    assert_false(have_pkg)
    with pytest.raises(TripWireError, match="install it"):
        pkg()
