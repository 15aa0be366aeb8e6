from __future__ import annotations

from domain.errors import ConfigurationError


def checkpoint_indices(total: int, amount: int) -> dict[int, int]:
    """
    Placement index → checkpoint id.

    Checkpoint ``k`` fires after placement ``(k + 1) * total // amount - 1``,
    so the last one always lands on the final placement.
    """
    if not (0 <= amount <= total):
        msg = f'checkpoint amount must be within [0, {total}], got {amount}'
        raise ConfigurationError(msg)
    return {(k + 1) * total // amount - 1: k for k in range(amount)}


def checkpoint_filename(prefix: str, checkpoint_id: int, fmt: str) -> str:
    return f'{prefix}_{checkpoint_id}.{fmt}'
