"""
Gesture rule set: a fixed catalog of named hand shapes.

Each entry pairs a gesture name with a description and a pure predicate over
one (21, 3) landmark frame. Predicates are threshold-based and independent of
each other, so several entries may fire on the same frame; separating them
over time is the temporal filter's job, not this module's.

The numeric thresholds below are the catalog's behavioral contract. They are
intentionally literal (including the loose C/O circle distances) and must not
be retuned without re-validating recognition against recorded sessions.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from signsense.core.types import (
    GestureDefinition, LandmarkFrame,
    WRIST, THUMB_MCP, THUMB_TIP,
    INDEX_MCP, INDEX_PIP, INDEX_TIP,
    MIDDLE_MCP, MIDDLE_PIP, MIDDLE_TIP,
    RING_MCP, RING_PIP, RING_TIP,
    PINKY_MCP, PINKY_TIP,
    FINGER_TIPS, FINGER_BASES, FOUR_TIPS, FOUR_BASES,
)
from signsense.modules.recognition.geometry import (
    between_x, count_extended, depth_clustered, distance, finger_extended,
    fingers_aligned, fingers_curled, points_horizontal, thumb_extended_sideways,
    wrist_in_region,
)

logger = logging.getLogger(__name__)

_X, _Y = 0, 1

# Fingertip-to-knuckle distance under which a finger counts as folded
# into the palm when the hand is held sideways.
_FOLDED_DISTANCE = 0.08


def _index_only(frame) -> bool:
    return (finger_extended(frame, INDEX_TIP, INDEX_MCP)
            and fingers_curled(frame, (MIDDLE_TIP, RING_TIP, PINKY_TIP),
                               (MIDDLE_MCP, RING_MCP, PINKY_MCP)))


def _index_middle_only(frame) -> bool:
    return (finger_extended(frame, INDEX_TIP, INDEX_MCP)
            and finger_extended(frame, MIDDLE_TIP, MIDDLE_MCP)
            and fingers_curled(frame, (RING_TIP, PINKY_TIP), (RING_MCP, PINKY_MCP)))


def _pinky_only(frame) -> bool:
    return (finger_extended(frame, PINKY_TIP, PINKY_MCP)
            and fingers_curled(frame, (INDEX_TIP, MIDDLE_TIP, RING_TIP),
                               (INDEX_MCP, MIDDLE_MCP, RING_MCP)))


def _folded(frame, tip: int, base: int) -> bool:
    return distance(frame, tip, base) < _FOLDED_DISTANCE


# =============================================================================
# Words and control gestures
# =============================================================================

def is_hello(frame: LandmarkFrame) -> bool:
    return count_extended(frame, FINGER_TIPS, FINGER_BASES) >= 4


def is_thank_you(frame: LandmarkFrame) -> bool:
    return fingers_aligned(frame, FOUR_TIPS, 0.05)


def is_yes(frame: LandmarkFrame) -> bool:
    return fingers_curled(frame, FOUR_TIPS, FOUR_BASES)


def is_no(frame: LandmarkFrame) -> bool:
    return _index_only(frame)


def is_please(frame: LandmarkFrame) -> bool:
    return depth_clustered(frame, FOUR_TIPS, 0.03) and frame[WRIST, _Y] > 0.5


def is_emergency(frame: LandmarkFrame) -> bool:
    # Fist held in front of the chest
    return is_yes(frame) and wrist_in_region(frame, (0.3, 0.7), (0.3, 0.7))


def is_space(frame: LandmarkFrame) -> bool:
    # Flat hand with the palm tilted down
    return is_thank_you(frame) and frame[MIDDLE_MCP, _Y] > frame[WRIST, _Y]


# =============================================================================
# ASL alphabet
# =============================================================================

def letter_a(f):
    return fingers_curled(f, FOUR_TIPS, FOUR_BASES) and f[THUMB_TIP, _Y] < f[INDEX_PIP, _Y]


def letter_b(f):
    return (count_extended(f, FOUR_TIPS, FOUR_BASES) == 4
            and not thumb_extended_sideways(f)
            and distance(f, INDEX_TIP, MIDDLE_TIP) < 0.06)


def letter_c(f):
    return (0.1 < distance(f, THUMB_TIP, INDEX_TIP) < 0.2
            and fingers_aligned(f, FOUR_TIPS, 0.1)
            and f[THUMB_TIP, _Y] > f[INDEX_TIP, _Y])


def letter_d(f):
    return _index_only(f) and distance(f, THUMB_TIP, MIDDLE_TIP) < 0.05


def letter_e(f):
    return (fingers_curled(f, FOUR_TIPS, FOUR_BASES)
            and f[THUMB_TIP, _Y] > f[INDEX_TIP, _Y]
            and f[THUMB_TIP, _Y] > f[MIDDLE_TIP, _Y])


def letter_f(f):
    return (distance(f, THUMB_TIP, INDEX_TIP) < 0.05
            and count_extended(f, (MIDDLE_TIP, RING_TIP, PINKY_TIP),
                               (MIDDLE_MCP, RING_MCP, PINKY_MCP)) == 3)


def letter_g(f):
    return (points_horizontal(f, INDEX_TIP, INDEX_MCP)
            and abs(f[THUMB_TIP, _Y] - f[INDEX_TIP, _Y]) < 0.05
            and _folded(f, MIDDLE_TIP, MIDDLE_MCP)
            and _folded(f, RING_TIP, RING_MCP))


def letter_h(f):
    return (points_horizontal(f, INDEX_TIP, INDEX_MCP)
            and points_horizontal(f, MIDDLE_TIP, MIDDLE_MCP)
            and _folded(f, RING_TIP, RING_MCP)
            and _folded(f, PINKY_TIP, PINKY_MCP))


def letter_i(f):
    return _pinky_only(f) and not thumb_extended_sideways(f)


def letter_j(f):
    # Static capture of the J hook: pinky up and swung outward
    return _pinky_only(f) and f[PINKY_TIP, _X] < f[PINKY_MCP, _X] - 0.05


def letter_k(f):
    return (_index_middle_only(f)
            and f[THUMB_TIP, _Y] < f[MIDDLE_MCP, _Y]
            and distance(f, INDEX_TIP, MIDDLE_TIP) > 0.05)


def letter_l(f):
    return (_index_only(f) and thumb_extended_sideways(f)
            and distance(f, THUMB_TIP, INDEX_TIP) > 0.15)


def letter_m(f):
    return (fingers_curled(f, FOUR_TIPS, FOUR_BASES)
            and between_x(f, THUMB_TIP, RING_MCP, PINKY_MCP)
            and f[THUMB_TIP, _Y] > f[RING_PIP, _Y])


def letter_n(f):
    return (fingers_curled(f, FOUR_TIPS, FOUR_BASES)
            and between_x(f, THUMB_TIP, MIDDLE_MCP, RING_MCP)
            and f[THUMB_TIP, _Y] > f[MIDDLE_PIP, _Y])


def letter_o(f):
    return (distance(f, THUMB_TIP, INDEX_TIP) < 0.05
            and distance(f, THUMB_TIP, MIDDLE_TIP) < 0.1)


def letter_p(f):
    # K shape pointed at the floor: wrist above the knuckles
    return (f[WRIST, _Y] < f[MIDDLE_MCP, _Y]
            and f[INDEX_TIP, _Y] > f[INDEX_MCP, _Y]
            and f[MIDDLE_TIP, _Y] > f[MIDDLE_MCP, _Y]
            and f[RING_TIP, _Y] < f[MIDDLE_TIP, _Y]
            and f[PINKY_TIP, _Y] < f[MIDDLE_TIP, _Y]
            and distance(f, INDEX_TIP, MIDDLE_TIP) > 0.04)


def letter_q(f):
    # G shape pointed at the floor
    return (f[WRIST, _Y] < f[INDEX_MCP, _Y]
            and f[INDEX_TIP, _Y] > f[INDEX_MCP, _Y]
            and f[THUMB_TIP, _Y] > f[THUMB_MCP, _Y]
            and all(f[tip, _Y] < f[INDEX_TIP, _Y] - 0.05
                    for tip in (MIDDLE_TIP, RING_TIP, PINKY_TIP)))


def letter_r(f):
    # Index and middle crossed: tip order flips relative to knuckle order
    return (_index_middle_only(f)
            and (f[INDEX_TIP, _X] - f[MIDDLE_TIP, _X]) * (f[INDEX_MCP, _X] - f[MIDDLE_MCP, _X]) < 0)


def letter_s(f):
    return (fingers_curled(f, FOUR_TIPS, FOUR_BASES)
            and not thumb_extended_sideways(f)
            and f[THUMB_TIP, _Y] < f[INDEX_TIP, _Y])


def letter_t(f):
    return (fingers_curled(f, FOUR_TIPS, FOUR_BASES)
            and between_x(f, THUMB_TIP, INDEX_MCP, MIDDLE_MCP)
            and f[THUMB_TIP, _Y] < f[INDEX_TIP, _Y])


def letter_u(f):
    return _index_middle_only(f) and distance(f, INDEX_TIP, MIDDLE_TIP) < 0.04


def letter_v(f):
    return _index_middle_only(f) and distance(f, INDEX_TIP, MIDDLE_TIP) > 0.06


def letter_w(f):
    return (count_extended(f, (INDEX_TIP, MIDDLE_TIP, RING_TIP),
                           (INDEX_MCP, MIDDLE_MCP, RING_MCP)) == 3
            and fingers_curled(f, (PINKY_TIP,), (PINKY_MCP,)))


def letter_x(f):
    # Hooked index: tip dropped below the PIP joint but still above the knuckle
    return (f[INDEX_PIP, _Y] < f[INDEX_TIP, _Y] < f[INDEX_MCP, _Y]
            and fingers_curled(f, (MIDDLE_TIP, RING_TIP, PINKY_TIP),
                               (MIDDLE_MCP, RING_MCP, PINKY_MCP)))


def letter_y(f):
    return (_pinky_only(f) and thumb_extended_sideways(f)
            and distance(f, THUMB_TIP, PINKY_TIP) > 0.2)


def letter_z(f):
    # Static capture of the Z stroke: index drawn off its vertical axis
    return (_index_only(f) and not thumb_extended_sideways(f)
            and abs(f[INDEX_TIP, _X] - f[INDEX_MCP, _X]) > 0.05)


# =============================================================================
# Catalog
# =============================================================================

_WORDS = (
    ("hello", "Open hand, at least four fingers raised", is_hello,
     "word", {"gujarati": "નમસ્તે"}),
    ("thank you", "Flat hand, fingertips level in a row", is_thank_you,
     "word", {"gujarati": "આભાર"}),
    ("yes", "Closed fist, all four fingers folded", is_yes,
     "word", {"gujarati": "હા"}),
    ("no", "Index finger raised, other fingers folded", is_no,
     "word", {"gujarati": "ના"}),
    ("please", "Flat palm facing the camera, held low", is_please,
     "word", {"gujarati": "કૃપા કરીને"}),
    ("EMERGENCY", "Closed fist held in front of the chest", is_emergency,
     "control", {"gujarati": "કટોકટી"}),
    ("SPACE", "Flat hand with the palm tilted down", is_space,
     "control", {}),
)

_LETTERS = (
    ("A", "Fist with the thumb resting up along the side", letter_a),
    ("B", "Four fingers straight up together, thumb folded across the palm", letter_b),
    ("C", "Fingers and thumb curved into a C", letter_c),
    ("D", "Index up, thumb touching the middle fingertip", letter_d),
    ("E", "Fingertips bent down over the tucked thumb", letter_e),
    ("F", "Thumb and index touching, other three fingers up", letter_f),
    ("G", "Index pointing sideways with the thumb parallel", letter_g),
    ("H", "Index and middle pointing sideways together", letter_h),
    ("I", "Pinky up, other fingers folded", letter_i),
    ("J", "Pinky up, swung outward", letter_j),
    ("K", "Index and middle up in a V, thumb between them", letter_k),
    ("L", "Index up and thumb out, forming an L", letter_l),
    ("M", "Thumb tucked under three fingers", letter_m),
    ("N", "Thumb tucked under two fingers", letter_n),
    ("O", "All fingertips meeting the thumb in a circle", letter_o),
    ("P", "K shape pointing down", letter_p),
    ("Q", "G shape pointing down", letter_q),
    ("R", "Index and middle crossed", letter_r),
    ("S", "Fist with the thumb across the front of the fingers", letter_s),
    ("T", "Thumb tucked between index and middle", letter_t),
    ("U", "Index and middle up together", letter_u),
    ("V", "Index and middle up, spread apart", letter_v),
    ("W", "Index, middle and ring up", letter_w),
    ("X", "Index hooked", letter_x),
    ("Y", "Thumb and pinky out", letter_y),
    ("Z", "Index traces a Z", letter_z),
)


def build_catalog(definitions: Iterable[GestureDefinition]) -> Mapping[str, GestureDefinition]:
    """Freeze a list of definitions into a read-only name -> definition map."""
    catalog: Dict[str, GestureDefinition] = {}
    for definition in definitions:
        if definition.name in catalog:
            raise ValueError(f"Duplicate gesture name in catalog: {definition.name!r}")
        catalog[definition.name] = definition
    return MappingProxyType(catalog)


def build_default_catalog() -> Mapping[str, GestureDefinition]:
    """The fixed word + alphabet catalog, in evaluation order."""
    definitions: List[GestureDefinition] = [
        GestureDefinition(name, description, predicate, category, translations)
        for name, description, predicate, category, translations in _WORDS
    ]
    definitions.extend(
        GestureDefinition(name, description, predicate, "letter")
        for name, description, predicate in _LETTERS
    )
    return build_catalog(definitions)


DEFAULT_CATALOG = build_default_catalog()


class GestureRuleSet:
    """Evaluates every catalog predicate against one landmark frame."""

    def __init__(self, catalog: Optional[Mapping[str, GestureDefinition]] = None):
        """
        Args:
            catalog: name -> GestureDefinition map. Defaults to the built-in
                     word + alphabet catalog; tests inject smaller ones.
        """
        self._catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self._names = tuple(self._catalog.keys())
        logger.debug("Gesture rule set loaded with %d entries", len(self._names))

    def evaluate(self, frame: LandmarkFrame) -> Dict[str, bool]:
        """Map every gesture name to whether its hand shape is present.

        The caller must only pass fully populated frames; "no hand" frames
        are not evaluated at all.
        """
        return {name: definition.matches(frame) for name, definition in self._catalog.items()}

    def matching(self, frame: LandmarkFrame) -> List[str]:
        """Names of the gestures present in the frame, in catalog order."""
        return [name for name, hit in self.evaluate(frame).items() if hit]

    def describe(self, name: str) -> str:
        return self._catalog[name].description

    def get(self, name: str) -> GestureDefinition:
        return self._catalog[name]

    @property
    def names(self) -> tuple:
        return self._names

    @property
    def catalog(self) -> Mapping[str, GestureDefinition]:
        return self._catalog

    def __contains__(self, name: str) -> bool:
        return name in self._catalog

    def __len__(self) -> int:
        return len(self._names)
