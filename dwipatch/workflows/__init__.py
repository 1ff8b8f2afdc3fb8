# init for workflows, the command line interfaces of dwipatch
import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submodules=["denoise", "flow_runner", "workflow"],
)
