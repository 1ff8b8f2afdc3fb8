#!/usr/bin/env python
"""Installation script for dwipatch package"""

from glob import glob
import os
from os.path import join as pjoin

# BEFORE importing setuptools, remove MANIFEST. setuptools doesn't properly
# update it when the contents of directories change.
if os.path.exists("MANIFEST"):
    os.remove("MANIFEST")

from setuptools import setup


def read_vars_from(info_file):
    """Read variables from Python text file

    Parameters
    ----------
    info_file : str
        filename of file to read

    Returns
    -------
    info_vars : dict
        dictionary of variables read from the file
    """
    ns = {}
    with open(info_file, "rt") as fobj:
        exec(fobj.read(), ns)
    return ns


# Get version and release info, which is all stored in dwipatch/info.py
info = read_vars_from(pjoin("dwipatch", "info.py"))


def main(**extra_args):
    setup(
        name=info["NAME"],
        maintainer=info["MAINTAINER"],
        maintainer_email=info["MAINTAINER_EMAIL"],
        description=info["DESCRIPTION"],
        long_description=info["LONG_DESCRIPTION"],
        license=info["LICENSE"],
        classifiers=info["CLASSIFIERS"],
        platforms=info["PLATFORMS"],
        version=info["VERSION"],
        provides=info["PROVIDES"],
        install_requires=info["REQUIRES"],
        extras_require=info["EXTRAS_REQUIRE"],
        python_requires=">=3.9",
        zip_safe=False,
        packages=[
            "dwipatch",
            "dwipatch.denoise",
            "dwipatch.denoise.tests",
            "dwipatch.io",
            "dwipatch.io.tests",
            "dwipatch.testing",
            "dwipatch.testing.tests",
            "dwipatch.utils",
            "dwipatch.utils.tests",
            "dwipatch.workflows",
            "dwipatch.workflows.tests",
        ],
        scripts=glob(pjoin("bin", "dwipatch_*")),
        **extra_args,
    )


# simple way to test what setup will do
# python setup.py install --prefix=/tmp
if __name__ == "__main__":
    main()
