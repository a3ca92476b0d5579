"""Diagnostics to evaluate code performance."""

from collections import OrderedDict

from loguru import logger

from ..grid import Mesh


def lru_cache_info() -> OrderedDict:
    """Return map of method names to cache info."""
    cache_info = OrderedDict()
    for name in ("lon", "lat", "cos_lat", "sin_lat", "tan_lat"):
        cache_info[f"Mesh.{name}"] = getattr(Mesh, name).cache_info()
    return cache_info


def log_lru_cache_info() -> None:
    """Log aggregated lru cache info."""
    info = lru_cache_info()
    max_len = max(map(len, info.keys()))
    logger.info(
        "lru_cache Info:\n{}",
        "\n".join(f"{m:{max_len}}: {i}" for m, i in info.items()),
    )
