import pygame

import config
from skyping.geodesy import distance_km
from .colors import BG_COLOR
from .compass import draw_compass
from .hud import draw_hud
from .notification import draw_notification


def render(screen, font, loop, source_name: str = ""):
    screen.fill(BG_COLOR)
    screen_w, screen_h = screen.get_size()

    center = (screen_w // 2, int(screen_h * 0.36))
    radius = min(screen_w, screen_h) // 4
    draw_compass(screen, font, center, radius, loop.bearing, locked=loop.notified is not None)

    n = loop.notified
    if n is not None:
        dist = distance_km(loop.user, n.sighting.position) if loop.user else None
        card = pygame.Rect(0, 0, min(460, screen_w - 40), 192)
        card.midtop = (screen_w // 2, center[1] + radius + 50)
        draw_notification(screen, font, n, dist, card, loop.look_direction())

    draw_hud(screen, font, loop, source_name)


def open_window():
    pygame.init()
    screen = pygame.display.set_mode((config.SCREEN_W, config.SCREEN_H))
    pygame.display.set_caption("SkyPing")
    font = pygame.font.SysFont("consolas,menlo,monospace", 16)
    return screen, font
