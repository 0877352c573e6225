"""Garden derivation. Pure functions over a list of plot states."""

from __future__ import annotations

from focusgarden.models import SESSIONS_PER_FLOWER, PlotState


def planted_count(garden: list[PlotState]) -> int:
    """Number of plots that have ever grown a flower (bloomed or withered)."""
    return sum(1 for plot in garden if plot != PlotState.EMPTY)


def bloomed_count(garden: list[PlotState]) -> int:
    return sum(1 for plot in garden if plot == PlotState.BLOOMED)


def fill_blooms_from_history(garden: list[PlotState], history_length: int) -> list[PlotState]:
    """Bloom empty plots until one flower stands for every two sessions.

    Plots that are already bloomed or withered count toward the target and
    are never touched. Empty plots fill lowest index first.
    """
    missing = history_length // SESSIONS_PER_FLOWER - planted_count(garden)
    grown = list(garden)
    for index, plot in enumerate(grown):
        if missing <= 0:
            break
        if plot == PlotState.EMPTY:
            grown[index] = PlotState.BLOOMED
            missing -= 1
    return grown


def wither_one(garden: list[PlotState]) -> list[PlotState]:
    """Wither the most recently bloomed flower (highest bloomed index).

    A garden without a bloomed plot is returned unchanged.
    """
    grown = list(garden)
    for index in range(len(grown) - 1, -1, -1):
        if grown[index] == PlotState.BLOOMED:
            grown[index] = PlotState.WITHERED
            break
    return grown


def wither(garden: list[PlotState], times: int) -> list[PlotState]:
    """Apply :func:`wither_one` *times* times."""
    for _ in range(times):
        garden = wither_one(garden)
    return garden
