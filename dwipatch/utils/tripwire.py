"""Stand-in object for optional packages that failed to import."""


class TripWireError(AttributeError):
    """Raised when a TripWire object is touched."""


def is_tripwire(obj):
    """Return True if `obj` is a TripWire placeholder

    Examples
    --------
    >>> is_tripwire(object())
    False
    >>> is_tripwire(TripWire('joblib is missing'))
    True
    """
    try:
        obj.any_attribute
    except TripWireError:
        return True
    except Exception:
        pass
    return False


class TripWire:
    """Placeholder raising `TripWireError` on any attribute access or call

    Used by :func:`dwipatch.utils.optpkg.optional_package` to stand in for a
    package that could not be imported, so the failure only surfaces when the
    package is actually needed.

    Examples
    --------
    >>> joblib = TripWire('We need joblib for parallel denoising')
    >>> joblib.Parallel #doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
        ...
    TripWireError: We need joblib for parallel denoising
    """

    def __init__(self, msg):
        self._msg = msg

    def __getattr__(self, attr_name):
        raise TripWireError(self._msg)

    def __call__(self, *args, **kwargs):
        raise TripWireError(self._msg)
