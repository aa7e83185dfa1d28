"""
Shared fixtures: synthetic hand landmark frames and a controllable clock.
"""

import numpy as np
import pytest

from signsense.modules.utils.config import Config

FINGERS = ("index", "middle", "ring", "pinky")

# Landmark index of each finger's MCP joint
_FINGER_MCP = {"index": 5, "middle": 9, "ring": 13, "pinky": 17}
_FINGER_X = {"index": 0.44, "middle": 0.50, "ring": 0.56, "pinky": 0.62}

# Tips are deliberately staggered in y and z so that neither the
# "fingertips level" nor the "fingertips same depth" rules fire by accident.
_EXTENDED_TIP_Y = {"index": 0.40, "middle": 0.34, "ring": 0.40, "pinky": 0.48}
_CURLED_TIP_Y = {"index": 0.64, "middle": 0.70, "ring": 0.66, "pinky": 0.76}
_TIP_Z = {"index": -0.02, "middle": -0.08, "ring": 0.0, "pinky": 0.06}


def make_hand(extended=(), wrist=(0.5, 0.8), thumb_sideways=False):
    """Build a (21, 3) float32 frame for an upright right hand.

    Args:
        extended: Names of the non-thumb fingers held straight up; the rest
                  are curled into the palm.
        wrist: (x, y) of the wrist. The whole hand is translated with it.
        thumb_sideways: Put the thumb tip outside its IP joint.
    """
    frame = np.zeros((21, 3), dtype=np.float32)
    frame[0] = (0.5, 0.8, 0.0)

    # Thumb: CMC, MCP, IP, TIP
    frame[1] = (0.42, 0.76, 0.0)
    frame[2] = (0.37, 0.72, 0.0)
    frame[3] = (0.33, 0.68, 0.0)
    frame[4] = (0.40, 0.70, 0.0) if thumb_sideways else (0.30, 0.62, 0.0)

    for finger in FINGERS:
        mcp = _FINGER_MCP[finger]
        x = _FINGER_X[finger]
        frame[mcp] = (x, 0.60, 0.0)
        if finger in extended:
            frame[mcp + 1] = (x, 0.50, 0.0)
            frame[mcp + 2] = (x, 0.45, 0.0)
            frame[mcp + 3] = (x, _EXTENDED_TIP_Y[finger], _TIP_Z[finger])
        else:
            frame[mcp + 1] = (x, 0.55, 0.0)
            frame[mcp + 2] = (x, 0.62, 0.0)
            frame[mcp + 3] = (x, _CURLED_TIP_Y[finger], _TIP_Z[finger])

    frame[:, 0] += wrist[0] - 0.5
    frame[:, 1] += wrist[1] - 0.8
    return frame


def shape(points=None, **hand):
    """make_hand(**hand) with individual landmarks moved to new (x, y, z)."""
    frame = make_hand(**hand)
    for index, xyz in (points or {}).items():
        frame[index] = xyz
    return frame


def _space_hand():
    frame = np.zeros((21, 3), dtype=np.float32)
    frame[0] = (0.5, 0.5, 0.0)
    frame[9] = (0.5, 0.7, 0.0)
    frame[[8, 12, 16, 20], 1] = 0.9
    return frame


def _please_hand():
    frame = make_hand(extended=FINGERS)
    frame[[8, 12, 16, 20], 2] = 0.0
    return frame


# One synthetic hand per catalog entry, each matching that entry's rule
CATALOG_HANDS = {
    "hello": lambda: make_hand(extended=FINGERS),
    "thank you": lambda: shape({8: (0.44, 0.40, -0.02), 12: (0.50, 0.40, -0.08),
                                16: (0.56, 0.40, 0.0), 20: (0.62, 0.40, 0.06)},
                               extended=FINGERS),
    "yes": make_hand,
    "no": lambda: make_hand(extended=("index",)),
    "please": _please_hand,
    "EMERGENCY": lambda: make_hand(wrist=(0.5, 0.5)),
    "SPACE": _space_hand,
    # Letters, upright right hand unless noted
    "A": lambda: shape({4: (0.40, 0.50, 0.0)}),
    "B": lambda: shape({12: (0.46, 0.38, -0.02)}, extended=FINGERS),
    "C": lambda: shape({4: (0.40, 0.55, 0.0)}, extended=FINGERS),
    "D": lambda: shape({4: (0.50, 0.70, -0.06)}, extended=("index",)),
    "E": lambda: shape({4: (0.47, 0.74, 0.0)}),
    "F": lambda: shape({4: (0.44, 0.63, -0.02)}, extended=("middle", "ring", "pinky")),
    "G": lambda: shape({8: (0.30, 0.58, 0.0), 4: (0.34, 0.62, 0.0),
                        12: (0.50, 0.64, -0.02)}),
    "H": lambda: shape({8: (0.30, 0.58, 0.0), 12: (0.36, 0.62, 0.0),
                        20: (0.62, 0.66, 0.0)}),
    "I": lambda: make_hand(extended=("pinky",)),
    "J": lambda: shape({20: (0.55, 0.48, 0.06)}, extended=("pinky",)),
    "K": lambda: shape({4: (0.47, 0.50, 0.0)}, extended=("index", "middle")),
    "L": lambda: make_hand(extended=("index",), thumb_sideways=True),
    "M": lambda: shape({4: (0.59, 0.58, 0.0)}),
    "N": lambda: shape({4: (0.53, 0.58, 0.0)}),
    "O": lambda: shape({4: (0.46, 0.66, -0.04)}),
    # P and Q point at the floor: wrist above the knuckles
    "P": lambda: shape({0: (0.5, 0.4, 0.0), 8: (0.42, 0.80, 0.0),
                        12: (0.52, 0.84, 0.0), 20: (0.62, 0.62, 0.0)}),
    "Q": lambda: shape({0: (0.5, 0.4, 0.0), 8: (0.44, 0.85, 0.0),
                        4: (0.40, 0.80, 0.0)}),
    "R": lambda: shape({8: (0.52, 0.40, -0.02), 12: (0.48, 0.36, -0.02)},
                       extended=("index", "middle")),
    "S": make_hand,
    "T": lambda: shape({4: (0.47, 0.58, 0.0)}),
    "U": lambda: shape({12: (0.46, 0.40, -0.02)}, extended=("index", "middle")),
    "V": lambda: shape({12: (0.56, 0.34, -0.08)}, extended=("index", "middle")),
    "W": lambda: make_hand(extended=("index", "middle", "ring")),
    "X": lambda: shape({6: (0.44, 0.48, 0.0), 8: (0.44, 0.54, 0.0)}),
    "Y": lambda: make_hand(extended=("pinky",), thumb_sideways=True),
    "Z": lambda: shape({8: (0.52, 0.40, -0.02)}, extended=("index",)),
}


class FakeClock:
    """Manually advanced clock returning seconds, like time.time."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def fist():
    return make_hand()


@pytest.fixture
def open_hand():
    return make_hand(extended=FINGERS)


@pytest.fixture
def index_only():
    return make_hand(extended=("index",))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fresh_config():
    """Config singleton, reset before and after the test."""
    Config.reset()
    yield Config()
    Config.reset()
