# support utilities for dwipatch
import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submodules=[
        "logging",
        "optpkg",
        "parallel",
        "tripwire",
    ],
)

__all__ = [
    "logging",
    "optpkg",
    "parallel",
    "tripwire",
]
