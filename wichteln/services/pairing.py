from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from loguru import logger

MAX_SHUFFLE_TRIALS = 200

PairingSet = Dict[str, List[str]]


class PairingError(RuntimeError):
    pass


def _validate_names(names: Sequence[str]) -> List[str]:
    givers = list(names)
    if len(givers) < 2:
        raise PairingError("At least 2 participants are required.")
    if any(not name for name in givers):
        raise PairingError("Participant names must not be empty.")
    if len(set(givers)) != len(givers):
        raise PairingError("Participant names must be unique.")
    return givers


def _has_fixed_point(givers: Sequence[str], recipients: Sequence[str]) -> bool:
    return any(giver == recipient for giver, recipient in zip(givers, recipients))


def _shuffle_recipients(givers: Sequence[str], rng: random.Random, max_trials: int) -> List[str]:
    recipients = list(givers)
    for _ in range(max_trials):
        rng.shuffle(recipients)
        if not _has_fixed_point(givers, recipients):
            return recipients

    # Rotation by one has no fixed points for two or more names.
    logger.bind(participants=len(givers), trials=max_trials).warning(
        "No derangement found by shuffling, rotating recipients"
    )
    return recipients[1:] + recipients[:1]


def _add_extra_recipient(pairings: PairingSet, givers: Sequence[str], rng: random.Random) -> None:
    extra_giver = rng.choice(givers)
    taken = pairings[extra_giver]
    choices = [name for name in givers if name != extra_giver and name not in taken]
    if choices:
        taken.append(rng.choice(choices))


def generate_pairings(
    names: Sequence[str],
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    max_trials: int = MAX_SHUFFLE_TRIALS,
) -> PairingSet:
    """Assign every name one recipient other than itself.

    Recipients are found by shuffling a copy of ``names`` until no position
    matches, at most ``max_trials`` times, and rotating by one position when
    no shuffle succeeds. For an odd number of names one random giver gets a
    second, distinct recipient so the leftover gift is covered.

    The result keeps the order of ``names`` as giver order. Pass ``seed`` or
    ``rng`` to make the draw reproducible.
    """
    givers = _validate_names(names)
    if rng is None:
        rng = random.Random(seed)

    recipients = _shuffle_recipients(givers, rng, max_trials)
    pairings: PairingSet = {giver: [recipient] for giver, recipient in zip(givers, recipients)}

    if len(givers) % 2 == 1:
        _add_extra_recipient(pairings, givers, rng)

    return pairings
