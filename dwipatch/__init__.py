"""
Patch2Self denoising for diffusion MRI
======================================

Subpackages
-----------
::

 denoise       -- Patch2Self leave-one-volume-out denoiser
 io            -- Loading/saving of NIfTI images and b-values
 testing       -- Assertion helpers and test decorators
 utils         -- Logging, optional packages, parallel mapping
 workflows     -- Command line for denoising files on disk

Utilities
---------
::

 __version__   -- dwipatch version

"""
from dwipatch.info import __version__

submodules = [
    "denoise",
    "io",
    "testing",
    "utils",
    "workflows",
]

__all__ = submodules + ["__version__"]
