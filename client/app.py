"""Main PyGame loop, scene manager, connection hand-off."""

from __future__ import annotations
import asyncio
import pygame
from shared.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, FPS, TITLE, DEFAULT_HOST, DEFAULT_PORT,
)
from client.settings import SessionContext
from client.matchmaking import MatchmakingSession
from client.game_session import GameSession
from client.scenes.lobby import LobbyScene
from client.scenes.game_scene import GameScene
from client.scenes.results import ResultsScene


class App:
    """Main application: owns the active connection and the scenes that draw it."""

    def __init__(self, context: SessionContext,
                 server_host: str = DEFAULT_HOST, server_port: int = DEFAULT_PORT):
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SCALED)
        pygame.display.set_caption(TITLE)
        self.clock = pygame.time.Clock()
        self.running = True

        self.context = context
        self.server_host = server_host
        self.server_port = server_port
        self.matchmaking: MatchmakingSession | None = None
        self.game: GameSession | None = None

        self.scenes: dict = {}
        self.current_scene = None
        self._init_scenes()

    def _init_scenes(self):
        self.scenes["lobby"] = LobbyScene(self)
        self.scenes["game"] = GameScene(self)
        self.scenes["results"] = ResultsScene(self)

    def set_scene(self, scene_name: str):
        self.current_scene = self.scenes.get(scene_name)

    @property
    def session(self):
        """The connection currently feeding the scenes."""
        if self.current_scene is self.scenes["lobby"]:
            return self.matchmaking
        return self.game

    # ------------------------------------------------------------------ #
    # Connections (call from inside the running loop)
    # ------------------------------------------------------------------ #

    def enter_lobby(self):
        print("[app] Entering matchmaking")
        self._close_all()
        self.matchmaking = MatchmakingSession(
            self.context, self.server_host, self.server_port)
        self.matchmaking.open()
        self.set_scene("lobby")

    def leave_lobby(self):
        if self.matchmaking:
            self.matchmaking.close()

    def enter_game(self, game_id: str):
        print(f"[app] Joining game {game_id}")
        self._close_all()
        self.game = GameSession(self.context, game_id, self.server_host, self.server_port)
        self.game.open()
        self.set_scene("game")

    def show_results(self, winner: str):
        self.scenes["results"].set_results(winner)
        self.set_scene("results")

    def _close_all(self):
        if self.matchmaking:
            self.matchmaking.close()
        if self.game:
            self.game.close()

    async def run(self, game_id: str | None = None):
        if game_id:
            self.enter_game(game_id)
        else:
            self.enter_lobby()

        while self.running:
            dt = self.clock.tick(FPS) / 1000.0

            # Process pygame events
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                if self.current_scene:
                    self.current_scene.handle_event(event)

            # Process network messages
            session = self.session
            if session is not None:
                for msg in session.pump():
                    self._handle_network_message(msg)

            # Update
            if self.current_scene:
                self.current_scene.update(dt)

            # Render
            if self.current_scene:
                self.current_scene.render(self.screen)

            pygame.display.flip()
            await asyncio.sleep(0)

        self._close_all()
        pygame.quit()

    def _handle_network_message(self, msg):
        if self.current_scene and hasattr(self.current_scene, "handle_network"):
            self.current_scene.handle_network(msg)
