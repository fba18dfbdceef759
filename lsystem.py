# lsystem.py

import math
import random
from dataclasses import dataclass, field
from types import MappingProxyType

import constants as C
import logger as log

@dataclass(frozen=True)
class GrammarSpec:
    """
    An immutable L-system description plus the presentation traits of the plant it grows.

    Each rule maps a single symbol to one of:
    - a replacement string,
    - a weighted list of (replacement, probability) pairs, probabilities summing to <= 1,
    - a generator function called with the expansion RNG, returning the replacement string.
    """
    axiom: str = C.LSYSTEM_DEFAULT_AXIOM
    rules: dict = field(default_factory=lambda: dict(C.LSYSTEM_DEFAULT_RULES))
    angle: float = C.LSYSTEM_DEFAULT_ANGLE # Turn angle in radians
    iterations: int = C.LSYSTEM_DEFAULT_ITERATIONS
    fruit_probability: float = 0.0
    color_variation: bool = False
    stem_color: tuple = C.DEFAULT_STEM_COLOR
    leaf_color: tuple = C.DEFAULT_LEAF_COLOR
    fruit_color: tuple = C.DEFAULT_FRUIT_COLOR
    stem_thickness: float = C.DEFAULT_STEM_THICKNESS
    name: str = "custom"

    def __post_init__(self):
        # Frozen dataclass: normalized values are written through object.__setattr__.
        iterations = int(self.iterations)
        clamped = max(0, min(iterations, C.LSYSTEM_MAX_ITERATIONS))
        if clamped != iterations:
            log.log(f"WARNING: Grammar '{self.name}' asked for {iterations} iterations; clamped to {clamped}.")
        object.__setattr__(self, "iterations", clamped)
        object.__setattr__(self, "rules", MappingProxyType(_normalize_rules(self.rules, self.name)))

def _normalize_rules(rules, grammar_name):
    """Copies a rule table, freezing weighted lists and dropping entries that cannot be applied."""
    normalized = {}
    for symbol, rule in rules.items():
        if isinstance(rule, str) or callable(rule):
            normalized[symbol] = rule
        elif isinstance(rule, (list, tuple)):
            try:
                weighted = tuple((str(replacement), float(probability)) for replacement, probability in rule)
            except (TypeError, ValueError) as e:
                log.log(f"WARNING: Grammar '{grammar_name}' rule for '{symbol}' is not a list of (replacement, probability) pairs ({e}); '{symbol}' will pass through.")
                continue
            if any(probability < 0 for _, probability in weighted):
                log.log(f"WARNING: Grammar '{grammar_name}' rule for '{symbol}' has a negative probability; '{symbol}' will pass through.")
                continue
            total = sum(probability for _, probability in weighted)
            if total > 1.0 + C.LSYSTEM_WEIGHT_TOLERANCE:
                log.log(f"WARNING: Grammar '{grammar_name}' rule for '{symbol}' sums to {total:.3f}; later choices are unreachable.")
            normalized[symbol] = weighted
        else:
            log.log(f"WARNING: Grammar '{grammar_name}' rule for '{symbol}' has unsupported type {type(rule).__name__}; '{symbol}' will pass through.")
    return normalized

def _rewrite(symbol, rule, rng):
    """Returns the replacement for a single symbol under its rule."""
    if rule is None:
        return symbol
    if isinstance(rule, str):
        return rule
    if callable(rule):
        replacement = rule(rng)
        if not isinstance(replacement, str):
            log.log(f"WARNING: Generator rule for '{symbol}' returned {type(replacement).__name__}; keeping the symbol.")
            return symbol
        return replacement

    # Weighted rule: one draw, walked against the cumulative probabilities in table order.
    draw = rng.random()
    cumulative = 0.0
    for replacement, probability in rule:
        cumulative += probability
        if draw < cumulative:
            return replacement
    # Probabilities summing below 1 leave a gap in which the symbol is kept.
    return symbol

def expand(spec, rng=None):
    """
    Rewrites the axiom of `spec` for `spec.iterations` generations and returns the production string.

    The production never exceeds C.LSYSTEM_MAX_PRODUCTION_LENGTH symbols. A generation that
    overshoots is truncated and no further generations are run.
    """
    if rng is None:
        rng = random.Random()

    result = spec.axiom
    for generation in range(spec.iterations):
        result = "".join(_rewrite(symbol, spec.rules.get(symbol), rng) for symbol in result)

        if len(result) > C.LSYSTEM_MAX_PRODUCTION_LENGTH:
            log.log(f"WARNING: L-system '{spec.name}' production reached {len(result)} symbols at iteration {generation + 1}; truncating to {C.LSYSTEM_MAX_PRODUCTION_LENGTH}.")
            result = result[:C.LSYSTEM_MAX_PRODUCTION_LENGTH]
            break

    # An oversized axiom with zero iterations still has to respect the cap.
    return result[:C.LSYSTEM_MAX_PRODUCTION_LENGTH]

# =============================================================================
# --- PRESETS ---
# =============================================================================
PRESETS = {
    "simple": GrammarSpec(
        name="simple",
        axiom="F",
        rules={"F": "FF+[+F]-[-F]+[+F]-[-F]"},
        angle=math.pi / 6,
        iterations=2,
        stem_color=(80, 120, 40),
        leaf_color=(100, 220, 50),
        stem_thickness=4.0,
    ),
    "tree": GrammarSpec(
        name="tree",
        axiom="F",
        rules={"F": "FF[+F][-F][+F]"},
        angle=math.pi / 7,
        iterations=3,
        stem_color=(100, 70, 20),
        leaf_color=(60, 200, 40),
        stem_thickness=5.0,
    ),
    "fern": GrammarSpec(
        name="fern",
        axiom="X",
        rules={"X": "F-[[X]+X]+F[+FX]-X", "F": "FF"},
        angle=math.pi / 8,
        iterations=2,
        stem_color=(70, 130, 40),
        leaf_color=(70, 200, 40),
        stem_thickness=3.0,
    ),
    "bush": GrammarSpec(
        name="bush",
        axiom="F",
        rules={"F": "FF+[+F][-F]+[+F][-F]"},
        angle=math.pi / 4,
        iterations=3,
        stem_color=(60, 100, 30),
        leaf_color=(120, 210, 40),
        stem_thickness=4.0,
    ),
    "flower": GrammarSpec(
        name="flower",
        axiom="X",
        rules={"X": "F[+X][-X]FX", "F": "FFF"},
        angle=math.pi / 5,
        iterations=3,
        fruit_probability=0.7,
        color_variation=True,
        stem_color=(100, 140, 40),
        leaf_color=(100, 200, 50),
        fruit_color=(255, 50, 100),
        stem_thickness=3.0,
    ),
    "cherry": GrammarSpec(
        name="cherry",
        axiom="F",
        rules={"F": "FFF-[-F+F+F*]+[+F-F-F*]"},
        angle=math.pi,
        iterations=2,
        fruit_probability=0.4,
        stem_color=(80, 40, 20),
        leaf_color=(120, 180, 40),
        fruit_color=(220, 20, 60),
        stem_thickness=4.0,
    ),
    "cactus": GrammarSpec(
        name="cactus",
        axiom="F",
        rules={"F": '[+"F][-F][+F][-F]FF[+F][-F]FFF'},
        angle=math.pi / 2,
        iterations=2,
        stem_color=(50, 150, 50),
        leaf_color=(50, 180, 50),
        stem_thickness=8.0,
    ),
    "thickbush": GrammarSpec(
        name="thickbush",
        axiom="F",
        rules={"F": '[+"F]["F][+F]F[+"F]["F][+F][-F]F[+F][-F][+F][-F][+F][-F]FF'},
        angle=math.pi / 6,
        iterations=2,
        stem_color=(70, 90, 30),
        leaf_color=(200, 250, 30),
        stem_thickness=5.0,
    ),
    "berry": GrammarSpec(
        name="berry",
        axiom="X",
        rules={"X": "F[-X][+X]FXFF*", "F": "FF*"},
        angle=math.pi / 4,
        iterations=3,
        fruit_probability=1.0,
        stem_color=(80, 50, 20),
        leaf_color=(60, 180, 60),
        fruit_color=(100, 50, 200),
        stem_thickness=3.0,
    ),
    "crystal": GrammarSpec(
        name="crystal",
        axiom="X",
        rules={"X": "F[-X]*[+X]*FXF[-X]*[+X]", "F": "F*F"},
        angle=math.pi / 3,
        iterations=2,
        fruit_probability=0.9,
        color_variation=True,
        stem_color=(100, 180, 220),
        leaf_color=(150, 230, 255),
        fruit_color=(80, 200, 255),
        stem_thickness=3.0,
    ),
}

PRESET_NAMES = tuple(PRESETS)

def create_preset(name):
    """Returns the named preset grammar, falling back to 'simple' for unknown names."""
    if name not in PRESETS:
        log.log(f"WARNING: Unknown plant type '{name}'; using 'simple'.")
        return PRESETS["simple"]
    return PRESETS[name]

def create_random_preset(rng=None):
    if rng is None:
        rng = random.Random()
    return PRESETS[rng.choice(PRESET_NAMES)]
