"""This file contains defines parameters for dwipatch that we use to fill
settings in setup.py and the package top-level docstring. In setup.py in
particular, we exec this file, so it cannot import dwipatch
"""

# dwipatch version information.  An empty _version_extra corresponds to a
# full release.  '.dev' as a _version_extra string means this is a development
# version
_version_major = 0
_version_minor = 3
_version_micro = 0
_version_extra = "dev0"

# Format expected by setup.py: string of form "X.Y.Z"
__version__ = f"{_version_major}.{_version_minor}.{_version_micro}{_version_extra}"

CLASSIFIERS = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "License :: OSI Approved :: BSD License",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Topic :: Scientific/Engineering",
]

description = "Self-supervised Patch2Self denoising of diffusion MRI"

long_description = """
========
dwipatch
========

dwipatch denoises 4D diffusion-weighted MRI acquisitions with Patch2Self,
a self-supervised leave-one-volume-out regression. Every volume is
predicted from the local 3D patches of all the other volumes of its group
(b0 or diffusion-weighted), using ordinary least squares or ridge
regression, so independent noise in the held out volume cannot be
reproduced by the prediction.

License
=======
``dwipatch`` is licensed under the terms of the BSD license.
"""

# versions for dependencies
NUMPY_MIN_VERSION = "1.22.4"
SCIPY_MIN_VERSION = "1.8"
NIBABEL_MIN_VERSION = "4.0.0"
PACKAGING_MIN_VERSION = "21"
LAZY_LOADER_MIN_VERSION = "0.1"
JOBLIB_MIN_VERSION = "1.0"

# Main setup parameters
NAME = "dwipatch"
MAINTAINER = "dwipatch developers"
MAINTAINER_EMAIL = "neuroimaging@python.org"
DESCRIPTION = description
LONG_DESCRIPTION = long_description
LICENSE = "BSD license"
CLASSIFIERS = CLASSIFIERS
PLATFORMS = "OS Independent"
MAJOR = _version_major
MINOR = _version_minor
MICRO = _version_micro
ISRELEASE = _version_extra == ""
VERSION = __version__
PROVIDES = ["dwipatch"]
REQUIRES = [
    f"numpy>={NUMPY_MIN_VERSION}",
    f"scipy>={SCIPY_MIN_VERSION}",
    f"nibabel>={NIBABEL_MIN_VERSION}",
    f"packaging>={PACKAGING_MIN_VERSION}",
    f"lazy_loader>={LAZY_LOADER_MIN_VERSION}",
]
EXTRAS_REQUIRE = {
    "parallel": [f"joblib>={JOBLIB_MIN_VERSION}"],
    "test": ["pytest", f"joblib>={JOBLIB_MIN_VERSION}"],
}
