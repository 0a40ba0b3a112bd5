import pygame

from skyping.models import NotifiedAircraft
from .colors import GREEN, AMBER, BLUE


def draw_notification(screen, font, notified: NotifiedAircraft, distance_km, rect, direction=None):
    """Plane card under the compass. Nothing is drawn without a notified aircraft."""
    if notified is None:
        return
    s = notified.sighting

    pygame.draw.rect(screen, (250, 250, 252), rect, border_radius=12)
    pygame.draw.rect(screen, BLUE, rect, 2, border_radius=12)

    x, y = rect.x + 16, rect.y + 12
    title = font.render("Plane Detected Overhead!", True, (30, 30, 40))
    screen.blit(title, (x, y))

    tag_text, tag_color = ("MOCK", AMBER) if notified.is_synthetic else ("LIVE", GREEN)
    tag = font.render(tag_text, True, tag_color)
    screen.blit(tag, (rect.right - tag.get_width() - 16, y))

    lines = [
        f"Look up! Flight {s.callsign or 'N/A'} is passing by.",
        f"Altitude: {round(s.alt_ft)} ft",
        f"Speed: {round(s.speed_knots)} knots",
    ]
    if distance_km is not None:
        lines.append(f"Distance: {distance_km:.1f} km")
    if direction:
        lines.append(f"Look: {direction}")
    lines.append("[SPACE] Tell me where to look")

    y += 30
    for line in lines:
        color = BLUE if line.startswith("[") else (60, 60, 70)
        screen.blit(font.render(line, True, color), (x, y))
        y += 22

