"""Concurrency management for the differencing engines.

The engines can spread independent coordinates (gradient, Jacobian) or
Hessian rows over a thread pool. Every task perturbs its own working copy of
the evaluation point, so tasks never share mutable state.
"""

from __future__ import annotations

import contextvars
import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Sequence, Tuple

__all__ = [
    "set_default_workers",
    "use_workers",
    "normalize_workers",
    "resolve_workers",
    "parallel_execute",
]


# Context-var and default
_workers_var: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "finitediff_workers", default=None
)
_DEFAULT_WORKERS: int = 1


def set_default_workers(n: int | None) -> None:
    """Sets the module-wide default used when an engine gets ``n_workers=None``.

    Args:
        n: Number of workers, or None to restore the serial default.
    """
    global _DEFAULT_WORKERS
    _DEFAULT_WORKERS = 1 if n is None else normalize_workers(n)


@contextmanager
def use_workers(n: int | None) -> Iterator[int | None]:
    """Temporarily sets the number of workers used when ``n_workers=None``.

    Args:
        n: Number of workers, or ``None`` to fall back to the module default.

    Yields:
        int | None: The previous context setting (restored on exit).
    """
    prev = _workers_var.get()
    token = _workers_var.set(None if n is None else normalize_workers(n))
    try:
        yield prev
    finally:
        _workers_var.reset(token)


def _int_env(name: str) -> int | None:
    """Reads a positive integer from an environment variable, or None if unset/invalid.

    Args:
        name: Environment variable name.

    Returns:
        Positive integer value, or None.
    """
    v = os.getenv(name)
    if not v:
        return None
    try:
        i = int(v)
        return i if i > 0 else None
    except ValueError:
        return None


def _detect_hw_threads() -> int:
    """Detects the number of hardware threads, capped by relevant environment variables.

    Returns:
        Number of hardware threads (at least 1).
    """
    hints = [
        _int_env("OMP_NUM_THREADS"),
        _int_env("MKL_NUM_THREADS"),
        _int_env("OPENBLAS_NUM_THREADS"),
        _int_env("VECLIB_MAXIMUM_THREADS"),
        _int_env("NUMEXPR_NUM_THREADS"),
    ]
    env_cap = min([h for h in hints if h is not None], default=None)
    hw = os.cpu_count() or 1
    return max(1, min(hw, env_cap) if env_cap else hw)


def normalize_workers(
    n_workers: Any
) -> int:
    """Ensures n_workers is a positive integer, defaulting to 1.

    Args:
        n_workers: Input number of workers (can be None, float, negative, etc.)

    Returns:
        int: A positive integer number of workers (at least 1).
    """
    try:
        n = int(n_workers)
    except (TypeError, ValueError):
        n = 1
    return 1 if n < 1 else n


def resolve_workers(n_workers: int | None, n_tasks: int) -> int:
    """Decides how many threads to use for ``n_tasks`` independent tasks.

    An explicit ``n_workers`` wins and is capped only by the number of tasks.
    ``None`` falls back to the value set with :func:`use_workers`, then to
    :func:`set_default_workers`; that default is also capped by the detected
    hardware threads.

    Args:
        n_workers: Requested number of workers, or None.
        n_tasks: Number of independent tasks.

    Returns:
        Number of threads to use (at least 1).
    """
    if n_workers is not None:
        requested = normalize_workers(n_workers)
        return max(1, min(requested, int(n_tasks)))
    ctx = _workers_var.get()
    requested = ctx if ctx is not None else _DEFAULT_WORKERS
    if requested <= 1 or n_tasks <= 1:
        return 1
    return max(1, min(requested, int(n_tasks), _detect_hw_threads()))


def parallel_execute(
    worker: Callable[..., Any],
    arg_tuples: Sequence[Tuple[Any, ...]],
    *,
    workers: int = 1,
) -> list[Any]:
    """Runs ``worker(*args)`` for each tuple in arg_tuples, in order.

    With ``workers > 1`` the calls run on a thread pool; the returned list
    keeps the order of ``arg_tuples`` either way.
    """
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futures = []
            for args in arg_tuples:
                # Each task gets its own copy of the current context
                ctx = contextvars.copy_context()
                futures.append(ex.submit(ctx.run, worker, *args))
            return [f.result() for f in futures]
    return [worker(*args) for args in arg_tuples]
