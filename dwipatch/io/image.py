import nibabel as nib
import numpy as np


def load_nifti(fname, return_img=False, as_ndarray=True):
    """Load data and affine from a nifti file.

    Parameters
    ----------
    fname : str or Path
        Full path to a nifti file.
    return_img : bool, optional
        Whether to also return the nibabel image, e.g. to reuse its header
        when saving a derived volume.
    as_ndarray : bool, optional
        Convert the nibabel ArrayProxy to a numpy.ndarray. Turn this off to
        delay reading the data from disk.

    Returns
    -------
    A tuple ``(data, affine)``, or ``(data, affine, img)`` when `return_img`
    is True.

    """
    img = nib.load(fname)
    data = np.asanyarray(img.dataobj) if as_ndarray else img.dataobj

    if return_img:
        return data, img.affine, img
    return data, img.affine


def save_nifti(fname, data, affine, hdr=None, dtype=None):
    """Save a data array into a nifti file.

    Parameters
    ----------
    fname : str or Path
        The full path to the file to be saved.
    data : ndarray
        The array with the data to save.
    affine : 4x4 array
        The affine transform associated with the file.
    hdr : nifti header, optional
        May contain additional information to store in the file header.
    dtype : dtype, optional
        On-disk data type. Default: taken from `hdr`, else from `data`.

    Raises
    ------
    ValueError
        If 64-bit integer data is given without a header or dtype. Analyze
        formats did not support it and many tools still do not read it.

    """
    danger_dts = (np.dtype("int64"), np.dtype("uint64"))
    if hdr is None and dtype is None and data.dtype in danger_dts:
        msg = f"Image data has type {data.dtype}, which may cause "
        msg += "incompatibilities with other tools. Please specify the "
        msg += "`hdr` or `dtype`, or cast the data with "
        msg += "`np.asarray(data, dtype=np.int32)`."
        raise ValueError(msg)

    result_img = nib.Nifti1Image(data, affine, header=hdr, dtype=dtype)
    result_img.to_filename(fname)
