import math
import pygame

from .colors import WHITE, GREY, DARK, RED, AMBER


def needle_points(center, radius: float, bearing_deg: float):
    """Triangle for a needle pointing at `bearing_deg` (0 = up, clockwise)."""
    cx, cy = center
    rad = math.radians(bearing_deg)
    tip = (cx + radius * math.sin(rad), cy - radius * math.cos(rad))
    half_w = radius * 0.12
    # base corners sit perpendicular to the needle axis
    left = (cx - half_w * math.cos(rad), cy - half_w * math.sin(rad))
    right = (cx + half_w * math.cos(rad), cy + half_w * math.sin(rad))
    return [tip, left, right]


def draw_compass(screen, font, center, radius: int, bearing_deg: float, locked: bool):
    """Compass face with N/E/S/W markers and the needle. Amber needle while scanning."""
    cx, cy = center
    pygame.draw.circle(screen, DARK, center, radius)
    pygame.draw.circle(screen, GREY, center, radius, 6)

    # ticks every 30°
    for deg in range(0, 360, 30):
        rad = math.radians(deg)
        r1 = radius - 16
        r2 = radius - 6
        x1 = cx + r1 * math.sin(rad)
        y1 = cy - r1 * math.cos(rad)
        x2 = cx + r2 * math.sin(rad)
        y2 = cy - r2 * math.cos(rad)
        pygame.draw.line(screen, GREY, (x1, y1), (x2, y2), 2)

    for label, deg in (("N", 0), ("E", 90), ("S", 180), ("W", 270)):
        rad = math.radians(deg)
        r = radius - 34
        surf = font.render(label, True, WHITE)
        rect = surf.get_rect(center=(cx + r * math.sin(rad), cy - r * math.cos(rad)))
        screen.blit(surf, rect)

    color = RED if locked else AMBER
    pygame.draw.polygon(screen, color, needle_points(center, radius - 44, bearing_deg))
    pygame.draw.circle(screen, WHITE, center, 8)

    text = font.render(f"{bearing_deg:05.1f}°", True, WHITE)
    screen.blit(text, text.get_rect(center=(cx, cy + radius + 22)))
