"""Central color palette for the Cannonfall client UI."""

BG_SCREEN        = (10, 10, 18)      # main game screen fill
BG_MENU          = (15, 15, 25)      # lobby/results screen fill
BG_HUD           = (20, 20, 30)      # top HUD bar
BG_PANEL         = (30, 30, 40)      # player list panel
BG_OVERLAY       = (20, 30, 24, 225) # vote overlay (with alpha)

BORDER_PANEL     = (60, 60, 80)      # panel separators/borders
BORDER_OVERLAY   = (240, 160, 70)    # roulette frame

CELL_SOLID       = (70, 74, 86)      # intact tile
CELL_BROKEN      = (110, 30, 30)     # broken tile
CELL_BORDER      = (35, 35, 45)
CELL_TARGETED    = (230, 200, 60)    # tile targeted this turn

PLAYER_SELF      = (70, 140, 240)
PLAYER_OTHER     = (200, 200, 210)
PLAYER_GHOST     = (70, 140, 240, 110)
CANNONBALL       = (20, 20, 20)

TEXT_NORMAL      = (180, 180, 200)   # default label text
TEXT_BRIGHT      = (220, 220, 240)   # primary readable text
TEXT_DIM         = (120, 120, 140)   # subtitle / hint text
TEXT_ERROR       = (255, 100, 100)   # error messages
TEXT_READY       = (100, 255, 100)   # paid / ready players
TEXT_TIMER       = (255, 200, 120)   # countdowns
TEXT_HIGHLIGHT   = (255, 220, 130)   # roulette winner

TITLE_TEXT       = (200, 180, 140)   # main game title
