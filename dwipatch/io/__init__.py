# init for io routines
import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submodules=["gradients", "image"],
    submod_attrs={
        "gradients": ["read_bvals"],
        "image": ["load_nifti", "save_nifti"],
    },
)
