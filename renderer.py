#renderer.py

import math
import pygame
import constants as C
from geometry import remap, clamp

def _line_width(thickness):
    return max(C.RENDER_MIN_LINE_WIDTH, int(round(thickness)))

def draw_leaf(screen, color, tip, parent):
    """Draws a small diamond leaf pointing along the parent->tip direction."""
    tx, ty = tip
    angle = math.atan2(ty - parent[1], tx - parent[0])
    points = [
        (tx, ty),
        (tx + math.cos(angle + C.LEAF_SIDE_ANGLE) * C.LEAF_SIDE_LENGTH, ty + math.sin(angle + C.LEAF_SIDE_ANGLE) * C.LEAF_SIDE_LENGTH),
        (tx + math.cos(angle) * C.LEAF_TIP_LENGTH, ty + math.sin(angle) * C.LEAF_TIP_LENGTH),
        (tx + math.cos(angle - C.LEAF_SIDE_ANGLE) * C.LEAF_SIDE_LENGTH, ty + math.sin(angle - C.LEAF_SIDE_ANGLE) * C.LEAF_SIDE_LENGTH),
    ]
    pygame.draw.polygon(screen, color, points)

def draw_fruit(screen, fruit):
    size = fruit.size * fruit.growth
    radius = size / 2
    if radius < 1:
        return
    pygame.draw.circle(screen, fruit.color, (fruit.x, fruit.y), radius)

    highlight_radius = max(1, int(size * C.FRUIT_HIGHLIGHT_SIZE / 2))
    highlight = pygame.Surface((highlight_radius * 2, highlight_radius * 2), pygame.SRCALPHA)
    pygame.draw.circle(highlight, C.COLOR_FRUIT_HIGHLIGHT, (highlight_radius, highlight_radius), highlight_radius)
    offset = size * C.FRUIT_HIGHLIGHT_OFFSET
    screen.blit(highlight, (fruit.x + offset - highlight_radius, fruit.y - offset - highlight_radius))

def draw_plant(screen, frame):
    """Draws one RenderFrame: segments deepest last, leaves on grown tips, then fruits."""
    show_leaves = frame.growth > C.LEAF_REVEAL_GROWTH
    for segment in frame.segments:
        if segment.growth <= 0:
            continue

        depth_factor = remap(segment.depth, *C.RENDER_DEPTH_TAPER_DEPTHS, *C.RENDER_DEPTH_TAPER_RANGE)
        width = _line_width(segment.thickness * max(depth_factor, 0.0) * segment.growth)
        start = (segment.x1, segment.y1)

        if segment.growth >= 1.0:
            end = (segment.x2, segment.y2)
            pygame.draw.line(screen, segment.color, start, end, width)
            if show_leaves and segment.is_tip and segment.depth >= C.LEAF_MIN_DEPTH:
                draw_leaf(screen, frame.leaf_color, end, start)
        else:
            # Partially revealed segments grow out from their start point.
            t = clamp(segment.growth, 0.0, 1.0)
            end = (segment.x1 + (segment.x2 - segment.x1) * t, segment.y1 + (segment.y2 - segment.y1) * t)
            pygame.draw.line(screen, segment.color, start, end, width)

    if frame.growth > C.FRUIT_REVEAL_GROWTH:
        for fruit in frame.fruits:
            draw_fruit(screen, fruit)

def draw_physics_debug(screen, physics):
    """Overlays every spring and point mass of a physics world."""
    positions = physics.arrays['positions']
    for spring in physics.springs:
        a = positions[spring.a.index]
        b = positions[spring.b.index]
        pygame.draw.line(screen, C.COLOR_DEBUG_SPRING, (a[0], a[1]), (b[0], b[1]), 1)
    for body in physics.bodies:
        color = C.COLOR_DEBUG_FIXED if body.is_fixed else C.COLOR_DEBUG_FREE
        pygame.draw.circle(screen, color, body.position, C.DEBUG_POINT_RADIUS)

def draw_attractor(screen, source):
    radius = int(source.radius)
    ring = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
    pygame.draw.circle(ring, C.COLOR_ATTRACTOR_FILL, (radius, radius), radius)
    screen.blit(ring, (source.x - radius, source.y - radius))
    pygame.draw.circle(screen, C.COLOR_ATTRACTOR, (source.x, source.y), radius, 1)

def draw_ground(screen, ground_y):
    pygame.draw.rect(screen, C.COLOR_GROUND, (0, ground_y, screen.get_width(), screen.get_height() - ground_y))

def draw_hud(screen, font, lines):
    """Draws lines of status text down the top-left corner."""
    for i, line in enumerate(lines):
        text_surface = font.render(line, True, C.COLOR_WHITE)
        screen.blit(text_surface, (C.UI_TEXT_POS_X, C.UI_TEXT_POS_Y + i * C.UI_TEXT_LINE_HEIGHT))

def draw_garden(screen, garden, font=None, debug=False, attractor_sources=(), hud_lines=()):
    screen.fill(C.COLOR_BACKGROUND)
    draw_ground(screen, garden.ground_y)
    for frame in garden.render_frames():
        draw_plant(screen, frame)
    if debug:
        draw_physics_debug(screen, garden.physics)
    for source in attractor_sources:
        draw_attractor(screen, source)
    if font is not None and hud_lines:
        draw_hud(screen, font, hud_lines)
