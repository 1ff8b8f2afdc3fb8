from functools import partial
import logging
from warnings import warn

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view
from scipy import linalg
import scipy.linalg.lapack as ll

from dwipatch.testing.decorators import warning_for_keywords
from dwipatch.utils.parallel import determine_num_processes, paramap

logger = logging.getLogger(__name__)

MODELS = ("ols", "ridge")

getrf, gecon, getrs = ll.get_lapack_funcs(("getrf", "gecon", "getrs"), dtype=np.float64)


def _pad_volumes(arr, patch_radius):
    """Zero-pad the three spatial axes of a 4D array by `patch_radius`.

    The volume axis is left untouched, so the padded array has shape
    ``arr.shape[:3] + 2 * patch_radius`` followed by ``arr.shape[-1]``.
    """
    pad_width = [(int(r), int(r)) for r in patch_radius] + [(0, 0)]
    return np.pad(arr, pad_width, mode="constant", constant_values=0)


def _extract_3d_patches(arr, patch_radius):
    """Extract 3D patches from 4D DWI data.

    Parameters
    ----------
    arr : ndarray
        The zero-padded 4D noisy DWI data. Each spatial axis carries
        ``patch_radius`` extra voxels on both sides.
    patch_radius : array of shape (3,)
        The radius of the local patch to be taken around each voxel (in
        voxels).

    Returns
    -------
    all_patches : ndarray of shape (nvolumes, patch_size, nvoxels)
        All 3D patches flattened out to be 2D corresponding to each 3D
        volume of the 4D DWI data. Patch offsets and voxel centers are both
        enumerated in row-major order over the spatial axes, so the last axis
        reshapes directly to the unpadded volume shape.

    """
    patch_radius = np.asarray(patch_radius, dtype=int)
    patch_size = 2 * patch_radius + 1
    dim = arr.shape[-1]

    output_shape = tuple(arr.shape[i] - 2 * patch_radius[i] for i in range(3))
    total_patches = int(np.prod(output_shape))

    patches = sliding_window_view(arr, tuple(int(s) for s in patch_size) + (dim,))
    all_patches = patches.reshape(total_patches, int(np.prod(patch_size)), dim)

    return np.ascontiguousarray(all_patches.transpose(2, 1, 0))


def _vol_split(train, vol_idx):
    """Split the patches into the predictors and the target of one volume.

    Parameters
    ----------
    train : ndarray of shape (nvolumes, patch_size, nvoxels)
        Array of all 3D patches flattened out to be 2D.
    vol_idx : int
        The volume number that needs to be held out for training.

    Returns
    -------
    cur_x : ndarray of shape (nvoxels, (nvolumes - 1) * patch_size)
        Array of patches corresponding to all volumes except the held out
        volume.
    y : ndarray of shape (nvoxels,)
        Center voxel of the held out volume's patches, used as the target
        for denoising.

    """
    n_vols, patch_len, n_voxels = train.shape
    assert patch_len % 2 == 1, "patches need an odd size to have a center"

    mask = np.ones(n_vols, dtype=bool)
    mask[vol_idx] = False
    cur_x = train[mask].reshape((n_vols - 1) * patch_len, n_voxels).T
    y = train[vol_idx, patch_len // 2, :]
    return cur_x, y


def _solve_lu(a, b):
    """Solve ``a @ x = b`` through an LU factorization of `a`.

    Raises
    ------
    LinAlgError
        If `a` is singular or its reciprocal condition number is below the
        float64 machine epsilon.
    """
    anorm = np.linalg.norm(a, 1)
    lu, piv, info = getrf(a, overwrite_a=False)
    if info > 0:
        raise linalg.LinAlgError(f"singular matrix, U[{info - 1}, {info - 1}] is zero")
    if info < 0:
        raise ValueError(f"illegal value in {-info}-th argument of internal getrf")
    rcond, info = gecon(lu, anorm, norm="1")
    if rcond < np.finfo(np.float64).eps:
        raise linalg.LinAlgError(f"ill-conditioned matrix (rcond={rcond:.3g})")
    x, info = getrs(lu, piv, b[:, np.newaxis])
    if info != 0:
        raise ValueError(f"illegal value in {-info}-th argument of internal getrs")
    return x.ravel()


def _fit_coefficients(cur_x, y, model, alpha):
    """Solve the (regularized) normal equations of a linear model.

    Parameters
    ----------
    cur_x : ndarray of shape (nvoxels, nfeatures)
        Design matrix.
    y : ndarray of shape (nvoxels,)
        Target vector.
    model : {'ols', 'ridge'}
        'ols' solves ``(X^T X) b = X^T y``, 'ridge' solves
        ``(X^T X + alpha I) b = X^T y``.
    alpha : float
        Regularization parameter, only used by the ridge model.

    Returns
    -------
    beta : ndarray of shape (nfeatures,)
        Regression coefficients. When the system is singular or
        ill-conditioned, the minimum norm least squares solution of the same
        system is returned instead.

    """
    gram = cur_x.T @ cur_x
    if model == "ridge":
        gram[np.diag_indices_from(gram)] += alpha
    elif model != "ols":
        raise ValueError(f"Invalid model: {model}. Should be one of {MODELS}.")
    rhs = cur_x.T @ y

    try:
        return _solve_lu(gram, rhs)
    except linalg.LinAlgError as err:
        logger.debug("Degenerate normal equations (%s), using least squares", err)
        return linalg.lstsq(gram, rhs)[0]


def _vol_denoise(train, vol_idx, model, data_shape, alpha):
    """Denoise a single 3D volume from the other volumes of its group.

    Parameters
    ----------
    train : ndarray of shape (nvolumes, patch_size, nvoxels)
        Array of all 3D patches flattened out to be 2D.
    vol_idx : int
        The volume number that needs to be held out for training.
    model : {'ols', 'ridge'}
        Linear model used to predict the held out volume.
    data_shape : tuple
        Shape of the (unpadded) group, only the spatial part is used.
    alpha : float
        Regularization parameter only for the ridge model.

    Returns
    -------
    pred : ndarray of shape data_shape[:3]
        The predicted, denoised volume.

    """
    cur_x, y = _vol_split(train, vol_idx)
    beta = _fit_coefficients(cur_x, y, model, alpha)
    return (cur_x @ beta).reshape(data_shape[:3])


def _denoise_group(data, patch_radius, model, alpha, n_jobs=1, engine="serial"):
    """Denoise every volume of a b0 or DWI group.

    The patches are extracted once and shared read-only by the per-volume
    fits, which are independent of each other and may run in parallel.

    Returns
    -------
    ndarray of float64, same shape as `data`.
    """
    train = _extract_3d_patches(
        _pad_volumes(data.astype(np.float64), patch_radius), patch_radius
    )
    logger.debug("Patch table of %d volumes, %d offsets, %d voxels", *train.shape)

    denoised = paramap(
        partial(_vol_denoise, train),
        list(range(data.shape[-1])),
        n_jobs=n_jobs,
        engine=engine,
        func_args=[model, data.shape, alpha],
    )
    return np.stack(denoised, axis=-1)


def _validate_inputs(data, bvals, patch_radius, model, b0_threshold, alpha):
    """Validate and normalize the inputs of :func:`patch2self`.

    Raises
    ------
    ValueError
        If the data is not 4D, if the number of b-values does not match the
        number of volumes, if the patch radius does not have 1 or 3
        non-negative integer components, if the model is unknown, or if
        ``b0_threshold`` or ``alpha`` are not (non-negative) scalars.

    Warns
    -----
    If the input data has less than 10 3D volumes.

    Returns
    -------
    bvals : ndarray of shape (N,)
    patch_radius : ndarray of shape (3,)
    model : str
        Lower-case model name.

    """
    if data.ndim != 4:
        raise ValueError(
            f"Patch2Self can only denoise 4D arrays, got {data.ndim}D data."
        )

    bvals = np.ravel(np.asarray(bvals, dtype=float))
    if bvals.size != data.shape[-1]:
        raise ValueError(
            f"Number of b-values ({bvals.size}) does not match the number of "
            f"volumes ({data.shape[-1]})."
        )

    patch_radius = np.asarray(patch_radius)
    if patch_radius.size == 1:
        patch_radius = np.repeat(patch_radius.ravel(), 3)
    elif patch_radius.size != 3:
        raise ValueError("patch_radius should have length 1 or 3")
    if not np.issubdtype(patch_radius.dtype, np.integer) or np.any(patch_radius < 0):
        raise ValueError("patch_radius components must be non-negative integers")

    if not isinstance(model, str) or model.lower() not in MODELS:
        raise ValueError(f"Invalid model: {model}. Should be one of {MODELS}.")

    if np.ndim(b0_threshold) != 0:
        raise ValueError("b0_threshold must be a scalar")
    if np.ndim(alpha) != 0 or alpha < 0:
        raise ValueError("alpha must be a non-negative scalar")

    if data.shape[-1] < 10:
        warn(
            "The input data has less than 10 3D volumes. Patch2Self may not "
            "give optimal denoising performance.",
            stacklevel=3,
        )

    return bvals, patch_radius.astype(int), model.lower()


@warning_for_keywords()
def patch2self(
    data,
    bvals,
    *,
    patch_radius=(0, 0, 0),
    model="ols",
    b0_threshold=50,
    alpha=0.01,
    b0_denoising=True,
    out_dtype=None,
    num_processes=1,
    engine="serial",
):
    """Patch2Self Denoiser.

    Each volume is predicted from the local 3D patches of every other volume
    of its group, b0 volumes (``bvals <= b0_threshold``) and diffusion
    weighted volumes being denoised separately. Noise that is independent
    across volumes cannot be predicted by the other volumes, so the
    prediction is a denoised version of the held out volume
    :footcite:p:`Fadnavis2020`.

    Parameters
    ----------
    data : ndarray
        The 4D noisy DWI data to be denoised.
    bvals : array of shape (N,)
        Array of the bvals from the DWI acquisition.
    patch_radius : int or array of shape (3,), optional
        The radius of the local patch to be taken around each voxel (in
        voxels). Patches that reach outside of the volume read zeros.
    model : {'ols', 'ridge'}, optional
        Linear model fitted to predict each volume.
    b0_threshold : int, optional
        Threshold for considering volumes as b0.
    alpha : float, optional
        Regularization parameter only for ridge regression model.
    b0_denoising : bool, optional
        Skips denoising b0 volumes if set to False.
    out_dtype : str or dtype, optional
        The dtype for the output array. Default: the input dtype promoted to
        floating point (at least float32). Predictions cast to an integer
        dtype are clipped to its range first.
    num_processes : int or None, optional
        Number of volumes fitted concurrently within a group. None uses all
        cores, negative values count back from the number of cores.
    engine : {'serial', 'joblib'}, optional
        How the per-volume fits are mapped. 'joblib' runs them in threads
        sharing the patch table.

    Returns
    -------
    denoised array : ndarray
        This is the denoised array of the same size as that of the input
        data, with its volumes in the input order.

    Notes
    -----
    A group holding a single volume cannot be held out against anything and
    is copied to the output unchanged, as are the b0 volumes when
    ``b0_denoising`` is False.

    References
    ----------
    .. footbibliography::

    """
    data = np.asarray(data)
    bvals, patch_radius, model = _validate_inputs(
        data, bvals, patch_radius, model, b0_threshold, alpha
    )
    if out_dtype is None:
        out_dtype = np.result_type(data.dtype, np.float32)
    else:
        out_dtype = np.dtype(out_dtype)
    n_jobs = determine_num_processes(num_processes)

    b0_idx = np.flatnonzero(bvals <= b0_threshold)
    dwi_idx = np.flatnonzero(bvals > b0_threshold)
    logger.info(
        "Patch2Self on %d b0 and %d DWI volumes (patch radius %s, %s model)",
        b0_idx.size,
        dwi_idx.size,
        tuple(patch_radius.tolist()),
        model,
    )

    denoised_arr = np.empty(data.shape, dtype=out_dtype)
    for name, idx, denoise in (
        ("b0", b0_idx, b0_denoising),
        ("DWI", dwi_idx, True),
    ):
        if idx.size == 0:
            continue
        if not denoise:
            logger.info("%s denoising skipped", name)
            denoised_arr[..., idx] = data[..., idx]
        elif idx.size == 1:
            # nothing to regress a lone volume on
            log = logger.info if name == "b0" else logger.warning
            log("Only one %s volume, copying it without denoising", name)
            denoised_arr[..., idx] = data[..., idx]
        else:
            logger.debug("Denoising %d %s volumes", idx.size, name)
            denoised = _denoise_group(
                data[..., idx], patch_radius, model, alpha, n_jobs=n_jobs, engine=engine
            )
            if np.issubdtype(out_dtype, np.integer):
                limits = np.iinfo(out_dtype)
                denoised = np.clip(denoised, limits.min, limits.max)
            denoised_arr[..., idx] = denoised

    return denoised_arr
