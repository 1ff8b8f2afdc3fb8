# init for denoise aka the denoising module
import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submodules=["patch2self"],
    submod_attrs={"patch2self": ["patch2self"]},
)
