# turtle_interpreter.py

import colorsys
import math
import random
from dataclasses import dataclass

import constants as C
from geometry import clamp

DRAW_SYMBOLS = ("F", "G")

@dataclass(frozen=True)
class Segment:
    """One drawn edge of the plant skeleton, in plant-local coordinates (y grows downward)."""
    x1: float
    y1: float
    x2: float
    y2: float
    depth: int # Branch nesting depth when the segment was drawn
    thickness: float # Thickness multiplier relative to the plant's stem thickness
    heading: float # Heading in radians at creation
    color: tuple
    is_root: bool = False

    @property
    def length(self):
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

@dataclass(frozen=True)
class FruitAnchor:
    x: float
    y: float
    size: float
    color: tuple
    heading: float

class TurtleState:
    """The pen: position, heading, thickness and color. Pushed and popped on branch symbols."""
    def __init__(self, x, y, heading, thickness, color):
        self.x = x
        self.y = y
        self.heading = heading
        self.thickness = thickness
        self.color = color

    def copy(self):
        return TurtleState(self.x, self.y, self.heading, self.thickness, self.color)

class WalkContext:
    """
    All mutable state of a single interpretation pass.
    The angle step lives here because '<' and '>' rescale it for the rest of the walk.
    """
    def __init__(self, angle_step, stem_color):
        self.angle_step = angle_step
        self.pen = TurtleState(0.0, 0.0, C.TURTLE_INITIAL_HEADING, C.TURTLE_INITIAL_THICKNESS, stem_color)
        self.stack = []
        self.segments = []
        self.fruits = []

    @property
    def depth(self):
        return len(self.stack)

def shift_color(color, rng):
    """Nudges hue, saturation and brightness of an RGB color by small random amounts."""
    r, g, b = (channel / 255.0 for channel in color[:3])
    h, s, v = colorsys.rgb_to_hsv(r, g, b)
    h = (h + rng.uniform(-C.COLOR_SHIFT_HUE_DEGREES, C.COLOR_SHIFT_HUE_DEGREES) / 360.0) % 1.0
    s = clamp(s + rng.uniform(-C.COLOR_SHIFT_SATURATION_PERCENT, C.COLOR_SHIFT_SATURATION_PERCENT) / 100.0, 0.0, 1.0)
    v = clamp(v + rng.uniform(-C.COLOR_SHIFT_BRIGHTNESS_PERCENT, C.COLOR_SHIFT_BRIGHTNESS_PERCENT) / 100.0, 0.0, 1.0)
    r, g, b = colorsys.hsv_to_rgb(h, s, v)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

def interpret(production, angle_step, fruit_probability=0.0, fruit_color=C.DEFAULT_FRUIT_COLOR,
              stem_color=C.DEFAULT_STEM_COLOR, color_variation=False,
              step_length=C.TURTLE_STEP_LENGTH, rng=None):
    """
    Walks a production string with a 2D turtle and returns (segments, fruits).

    Turns are randomized (angle_step scaled by U(0.8, 3.0)) and fruits are drawn with
    `fruit_probability`, so two walks of the same string differ unless `rng` is seeded.
    """
    if rng is None:
        rng = random.Random()

    ctx = WalkContext(angle_step, stem_color)
    pen = ctx.pen

    for symbol in production:
        if symbol in DRAW_SYMBOLS:
            old_x, old_y = pen.x, pen.y
            pen.x += math.cos(pen.heading) * step_length
            pen.y += math.sin(pen.heading) * step_length
            ctx.segments.append(Segment(
                x1=old_x, y1=old_y, x2=pen.x, y2=pen.y,
                depth=ctx.depth,
                thickness=pen.thickness,
                heading=pen.heading,
                color=pen.color,
                is_root=ctx.depth == 0 and old_y >= C.TURTLE_ROOT_BASELINE_Y,
            ))
        elif symbol == "f":
            pen.x += math.cos(pen.heading) * step_length
            pen.y += math.sin(pen.heading) * step_length
        elif symbol == "+":
            pen.heading += ctx.angle_step * rng.uniform(C.TURTLE_TURN_JITTER_MIN, C.TURTLE_TURN_JITTER_MAX)
        elif symbol == "-":
            pen.heading -= ctx.angle_step * rng.uniform(C.TURTLE_TURN_JITTER_MIN, C.TURTLE_TURN_JITTER_MAX)
        elif symbol == "<":
            ctx.angle_step *= C.TURTLE_ANGLE_SCALE_DOWN
        elif symbol == ">":
            ctx.angle_step *= C.TURTLE_ANGLE_SCALE_UP
        elif symbol == "[":
            ctx.stack.append(pen.copy())
            pen.thickness *= C.TURTLE_BRANCH_THICKNESS_TAPER
        elif symbol == "]":
            if ctx.stack:
                saved = ctx.stack.pop()
                pen.x, pen.y = saved.x, saved.y
                pen.heading = saved.heading
                pen.thickness = saved.thickness
                pen.color = saved.color
        elif symbol == "!":
            pen.thickness *= C.TURTLE_THIN_FACTOR
        elif symbol == '"':
            pen.thickness *= C.TURTLE_THICKEN_FACTOR
        elif symbol == "*":
            if rng.random() < fruit_probability:
                ctx.fruits.append(FruitAnchor(
                    x=pen.x, y=pen.y,
                    size=rng.uniform(C.FRUIT_SIZE_MIN, C.FRUIT_SIZE_MAX),
                    color=fruit_color,
                    heading=pen.heading,
                ))
        elif symbol == "c":
            if color_variation:
                pen.color = shift_color(pen.color, rng)

    return ctx.segments, ctx.fruits

def interpret_grammar(spec, production, rng=None):
    """Interprets a production using the turn angle, fruit and color traits of its GrammarSpec."""
    return interpret(
        production,
        spec.angle,
        fruit_probability=spec.fruit_probability,
        fruit_color=spec.fruit_color,
        stem_color=spec.stem_color,
        color_variation=spec.color_variation,
        rng=rng,
    )
