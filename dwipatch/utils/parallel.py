"""Mapping a function over independent inputs, serially or in parallel."""

from multiprocessing import cpu_count
from warnings import warn

from dwipatch.testing.decorators import warning_for_keywords
from dwipatch.utils.optpkg import optional_package

joblib, has_joblib, _ = optional_package("joblib")

ENGINES = ("serial", "joblib")


def determine_num_processes(num_processes):
    """Determine the effective number of workers for parallelization.

    - ``None`` selects every core reported by ``cpu_count()``.
    - A positive value is returned unchanged.
    - A negative value counts back from the number of cores, so ``-1`` uses
      all of them and ``-2`` leaves one free.
    - ``0`` raises a ValueError.

    Parameters
    ----------
    num_processes : int or None
        Desired number of workers.

    Returns
    -------
    int
        The number of workers to launch, always at least 1.
    """
    if not isinstance(num_processes, int) and num_processes is not None:
        raise TypeError("num_processes must be an int or None")

    if num_processes == 0:
        raise ValueError("num_processes cannot be 0")

    try:
        if num_processes is None:
            return cpu_count()
        if num_processes < 0:
            return max(1, cpu_count() + num_processes + 1)
    except NotImplementedError:
        warn("Cannot determine number of cores. Using only 1.", stacklevel=2)
        return 1

    return num_processes


@warning_for_keywords()
def paramap(
    func,
    in_list,
    *,
    n_jobs=-1,
    engine="serial",
    backend=None,
    func_args=None,
    func_kwargs=None,
    **kwargs,
):
    """Map a function to a list of inputs, possibly in parallel.

    Parameters
    ----------
    func : callable
        The function to apply to each item. Must have the form
        ``func(item, *func_args, **func_kwargs)``.
    in_list : list
        A sequence of items each of which can be an input to ``func``.
    n_jobs : int, optional
        The number of jobs to perform in parallel. -1 to use all cpus.
    engine : str, optional
        {"serial", "joblib"}. "serial" runs the items one after the other in
        the calling thread and is useful for debugging.
    backend : str, optional
        The joblib backend. Default "threading", which lets every worker read
        the same arrays without copying them.
    func_args : list, optional
        Positional arguments to `func`.
    func_kwargs : dict, optional
        Keyword arguments to `func`.
    kwargs : dict, optional
        Additional arguments to pass to ``joblib.Parallel``.

    Returns
    -------
    list
        One result per input item, in input order.

    """
    func_args = func_args or []
    func_kwargs = func_kwargs or {}

    if engine == "joblib":
        if not has_joblib:
            raise joblib()
        if backend is None:
            backend = "threading"
        pp = joblib.Parallel(n_jobs=n_jobs, backend=backend, **kwargs)
        dd = joblib.delayed(func)
        results = pp(dd(ii, *func_args, **func_kwargs) for ii in in_list)
    elif engine == "serial":
        results = [func(ii, *func_args, **func_kwargs) for ii in in_list]
    else:
        raise ValueError(f"{engine} is not a valid engine, use one of {ENGINES}")

    return list(results)
