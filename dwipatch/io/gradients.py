import io
from os.path import splitext
import re

import numpy as np

BVAL_EXTENSIONS = (".bvals", ".bval", ".txt", "")


def read_bvals(fbvals):
    """Read b-values from disk.

    Parameters
    ----------
    fbvals : str or Path
        Full path to file with b-values, either a text file ('.bvals',
        '.bval', '.txt' or no extension) with values separated by spaces,
        tabs or commas, or a '.npy' file.

    Returns
    -------
    bvals : array, (N,)

    """
    fbvals = str(fbvals)
    _, ext = splitext(fbvals)
    if ext in BVAL_EXTENSIONS:
        with open(fbvals, "r") as f:
            content = f.read()
        munged_content = io.StringIO(re.sub(r"(\t|,)", " ", content))
        bvals = np.loadtxt(munged_content)
    elif ext == ".npy":
        bvals = np.load(fbvals)
    else:
        raise ValueError(f"File type {ext} is not recognized")

    return np.atleast_1d(np.squeeze(bvals))
