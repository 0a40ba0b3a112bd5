WHITE = (235, 235, 240)
GREY = (120, 120, 130)
DARK = (40, 40, 48)
CYAN = (80, 200, 230)
AMBER = (255, 190, 40)
RED = (239, 68, 68)
GREEN = (60, 200, 110)
BLUE = (37, 99, 235)
BG_COLOR = (12, 12, 18)
