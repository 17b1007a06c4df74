"""Taichi runtime initialization.

Every module that allocates Taichi fields (scene tables, material registry,
render target) must be imported after the runtime is initialized, so callers
should run init_taichi() first and import those modules lazily.

Geometry is computed in double precision: the runtime is initialized with
default_fp=ti.f64 so float literals and locals inside Taichi functions are
64-bit. Colors are stored in 32-bit fields.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.core.renderer import Renderer
"""

import taichi as ti


def init_taichi(debug: bool = False, offline_cache: bool = True) -> None:
    """Initialize Taichi on the CPU backend with 64-bit default floats.

    Rendering is single-threaded: the pixel loop is serialized and the CPU
    thread pool is limited to one worker.

    Args:
        debug: Enable Taichi debug mode (bounds checking in kernels).
        offline_cache: Reuse compiled kernels across processes.
    """
    ti.init(
        arch=ti.cpu,
        default_fp=ti.f64,
        cpu_max_num_threads=1,
        debug=debug,
        offline_cache=offline_cache,
    )
