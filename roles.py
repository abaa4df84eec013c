"""Semantic UI roles over ladder levels."""

from dataclasses import asdict, dataclass

from ladder import step_by_key


BASE_KEY = "0"

ROLE_NAMES = ('default', 'hover', 'disabled', 'tint_1', 'tint_2', 'shade_1', 'shade_2')


@dataclass(frozen=True)
class RoleKeys:
    """Ladder step key for each role."""
    default: str
    hover: str
    disabled: str
    tint_1: str
    tint_2: str
    shade_1: str
    shade_2: str

    def as_dict(self) -> dict:
        return asdict(self)


def compute_role_keys(steps) -> RoleKeys:
    """
    Assign roles from the set of levels present.

    default is level +1 (else the nearest shade), hover is level +2 (else the
    topmost shade), disabled is the most negative tint. tint_1/tint_2 are the
    least/most negative tints and shade_1/shade_2 the least/most positive
    shades. Anything missing falls back to the base key.
    """
    by_level = {s.level: s for s in steps}
    base = by_level[0].key if 0 in by_level else BASE_KEY
    pos = sorted((s for s in steps if s.level > 0), key=lambda s: s.level)
    neg = sorted((s for s in steps if s.level < 0), key=lambda s: s.level)

    if 1 in by_level:
        default = by_level[1].key
    else:
        default = pos[0].key if pos else base

    if 2 in by_level:
        hover = by_level[2].key
    else:
        hover = pos[-1].key if pos else default

    return RoleKeys(
        default=default,
        hover=hover,
        disabled=neg[0].key if neg else base,
        tint_1=neg[-1].key if neg else base,
        tint_2=neg[0].key if neg else base,
        shade_1=pos[0].key if pos else base,
        shade_2=pos[-1].key if pos else base,
    )


def role_steps(steps) -> dict:
    """Resolve every role to its LadderStep (None only for an empty ladder)."""
    keys = compute_role_keys(steps)
    return {role: step_by_key(steps, key) for role, key in keys.as_dict().items()}
