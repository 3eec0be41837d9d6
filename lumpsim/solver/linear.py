from __future__ import annotations

import logging
import numpy as np

from ..config import SolverConfig
from ..errors import SingularSystemError

logger = logging.getLogger(__name__)

Array = np.ndarray


def solve(A: Array, z: Array, config: SolverConfig | None = None, step: int | None = None) -> Array:
    """
    Solve the dense linear system A x = z.

    The solver is stateless and leaves A and z untouched. No approximate or
    least-squares fallback is attempted: a system that cannot be solved
    reliably is an error.

    Args:
        A: Square coefficient matrix.
        z: Right-hand side vector.
        config: SolverConfig with the conditioning limit (default: SolverConfig()).
        step: Step number, only used to annotate errors.

    Returns:
        Solution vector x.

    Raises:
        SingularSystemError: If A is singular, ill-conditioned, or the
            solution is not finite.
    """
    if config is None:
        config = SolverConfig()
    A = np.asarray(A, dtype=float)
    z = np.asarray(z, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1] or z.shape != (A.shape[0],):
        raise ValueError(f"Incompatible system shapes {A.shape} and {z.shape}.")
    if A.shape[0] == 0:
        return np.empty(0)

    where = f" at step {step}" if step is not None else ""
    try:
        x = np.linalg.solve(A, z)
    except np.linalg.LinAlgError as exc:
        logger.error("Singular MNA matrix%s.", where)
        raise SingularSystemError(f"Singular MNA matrix{where}.", step=step) from exc

    if config.check_condition:
        cond = float(np.linalg.cond(A))
        if not np.isfinite(cond) or cond > config.max_condition:
            logger.error("Ill-conditioned MNA matrix%s (cond=%.3e).", where, cond)
            raise SingularSystemError(
                f"Ill-conditioned MNA matrix{where} (condition number {cond:.3e}).",
                step=step, condition=cond,
            )
    if not np.all(np.isfinite(x)):
        logger.error("Non-finite MNA solution%s.", where)
        raise SingularSystemError(f"Non-finite MNA solution{where}.", step=step)
    return x
