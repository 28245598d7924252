"""Game constants shared by the client runtime."""

from enum import Enum

# Display
SCREEN_WIDTH = 1024
SCREEN_HEIGHT = 720
FPS = 60
TITLE = "Cannonfall"
CELL_SIZE = 72

# Server
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
GAME_PATH = "/ws/game/{game_id}"
MATCHMAKING_PATH = "/ws/matchmaking"

# Timers
TICK_SECONDS = 0.25          # countdown ticker cadence
DEFAULT_TURN_DURATION = 5    # used when the server omits turn_duration
TURN_SAFETY_MARGIN = 1       # local turn timer runs this many seconds short
MIN_TURN_SECONDS = 1

# Roulette draw ceremony (seconds)
ROULETTE_START_INTERVAL = 0.26
ROULETTE_FLOOR_INTERVAL = 0.10
ROULETTE_ACCEL_STEP = 0.02
ROULETTE_DECEL_STEP = 0.035
ROULETTE_STOP_INTERVAL = 0.42
ROULETTE_STEADY_TICKS = 10
ROULETTE_STEADY_JITTER = 5
ROULETTE_HIGHLIGHT_DELAY = 0.5

# Error code the server uses when another session takes over our wallet
SESSION_KICKED_CODE = "SESSION_KICKED"


class Direction(str, Enum):
    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"


# (dx, dy) per direction; y grows downwards, grid is indexed grid[y][x]
DIRECTION_DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class Cell(str, Enum):
    SOLID = "Solid"
    BROKEN = "Broken"


class TurnPhase(str, Enum):
    IDLE = "idle"
    PREGAME_VOTE = "pregame_vote"
    MOVE = "move"
    WAIT = "wait"
    ENDED = "ended"


class RollPhase(str, Enum):
    ACCELERATE = "accelerate"
    STEADY = "steady"
    DECELERATE = "decelerate"
    STOPPED = "stopped"


class MessageType(str, Enum):
    # Client -> Server
    MOVE = "Move"
    GAME_MODE_VOTE = "GameModeVote"
    PAY = "Pay"
    CANCEL_PAYMENT = "CancelPayment"
    # Server -> Client (game)
    GAME_PRE_GAME_DATA = "GamePreGameData"
    GAME_MODE_VOTE_UPDATE = "GameModeVoteUpdate"
    GAME_MODE_CHOSEN = "GameModeChosen"
    GAME_INIT = "GameInit"
    GAME_STATE_UPDATE = "GameStateUpdate"
    GAME_ENDED = "GameEnded"
    SESSION_KICKED = "SessionKicked"
    # Server -> Client (matchmaking)
    UPDATE_STATE = "UpdateState"
    PLAYER_JOIN = "PlayerJoin"
    PLAYER_LEAVE = "PlayerLeave"
    GAME_STARTED = "GameStarted"
    # Both
    ERROR = "Error"


# Matchmaking variants that all carry a full roster resnapshot
ROSTER_MESSAGES = (
    MessageType.UPDATE_STATE,
    MessageType.PLAYER_JOIN,
    MessageType.PLAYER_LEAVE,
)
