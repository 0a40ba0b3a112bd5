import pygame
import textwrap

from skyping.models import TrackingState
from .colors import WHITE, GREY, AMBER, GREEN, CYAN

STATE_LABELS = {
    TrackingState.IDLE: ("IDLE", GREY),
    TrackingState.ACQUIRING_LOCATION: ("LOCATING", AMBER),
    TrackingState.LIVE_TRACKING: ("LIVE", GREEN),
    TrackingState.SYNTHETIC_TRACKING: ("SYNTHETIC", CYAN),
}


def draw_hud(screen, font, loop, source_name: str = ""):
    """Top status line + bottom controls strip."""
    screen_w, screen_h = screen.get_size()
    margin_x, margin_y = 14, 10
    line_spacing = 20

    label, color = STATE_LABELS.get(loop.state, ("?", WHITE))
    header = font.render(f"[{label}] {source_name}", True, color)
    screen.blit(header, (margin_x, margin_y))

    y = margin_y + line_spacing
    for wline in textwrap.wrap(loop.status, width=max(20, (screen_w - 2 * margin_x) // 9)):
        screen.blit(font.render(wline, True, WHITE), (margin_x, y))
        y += line_spacing

    if loop.user is not None:
        pos = font.render(f"You: {loop.user.lat:.4f}, {loop.user.lon:.4f}", True, GREY)
        screen.blit(pos, (screen_w - pos.get_width() - margin_x, margin_y))

    controls = "[L] Live  [S] Synthetic  [1/2/3] Scenario  [X] Stop  [SPACE] Where?  [ESC] Quit"
    surf = font.render(controls, True, GREY)
    screen.blit(surf, (margin_x, screen_h - line_spacing - margin_y))

    pygame.draw.line(screen, (60, 60, 70), (0, screen_h - 2 * line_spacing),
                     (screen_w, screen_h - 2 * line_spacing), 1)
