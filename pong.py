"""
Play Pong against the CPU.

Usage:
- python pong.py                       # keyboard (W/S or arrows), level 1
- python pong.py --control pointer     # paddle follows the mouse
- python pong.py --level 7 --win-score 5 --no-smoothing
"""
import argparse
import logging
import sys

import pygame

from pong_ai import MAX_LEVEL, MIN_LEVEL
from pong_audio import AudioFeedback
from pong_match import ControlMode, Event, MatchConfig, MatchController, MatchState
from pong_physics import FIELD_H, FIELD_W
from pong_render import Renderer
from pong_scheduler import FrameScheduler

logger = logging.getLogger("pong")

FPS = 60
LEVEL_KEYS = {getattr(pygame, f"K_{n}"): (n or 10) for n in range(10)}


def handle_key(match, event, audio):
    """Menu/pause keys. Returns False when the window should close."""
    key = event.key
    if key == pygame.K_ESCAPE:
        if match.state == MatchState.MENU:
            return False
        match.stop()
    elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
        match.start()
    elif key in (pygame.K_p, pygame.K_SPACE):
        match.toggle_pause()
    elif key == pygame.K_m:
        logger.info("sound %s", "on" if audio.toggle() else "off")
    elif key == pygame.K_t:
        match.set_paddle_smoothing(not match.player.smoothing)
        logger.info("paddle smoothing %s", "on" if match.player.smoothing else "off")
    elif key == pygame.K_c:
        mode = ControlMode.KEYBOARD if match.config.control_mode == ControlMode.POINTER else ControlMode.POINTER
        match.set_control_mode(mode)
        logger.info("control mode: %s", mode.value)
    elif key in LEVEL_KEYS and match.state in (MatchState.MENU, MatchState.ENDED):
        match.select_level(LEVEL_KEYS[key])
    return True


def game(config, mute=False):
    pygame.init()
    screen = pygame.display.set_mode((int(config.field_width), int(config.field_height)), pygame.RESIZABLE)
    pygame.display.set_caption("Pong")
    clock = pygame.time.Clock()

    match = MatchController(config)
    renderer = Renderer(screen)
    audio = AudioFeedback(enabled=not mute)
    match.subscribe(audio)

    def on_event(ev, payload):
        if ev == Event.SCORE:
            renderer.flash_score(payload["owner"], pygame.time.get_ticks())

    match.subscribe(on_event)
    scheduler = FrameScheduler(match, render=lambda frame: renderer.draw(frame, pygame.time.get_ticks()))

    running = True
    while running:
        was_playing = match.state == MatchState.PLAYING
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                running = handle_key(match, event, audio)
            elif event.type == pygame.MOUSEMOTION:
                match.pointer_moved(event.pos[1])
            elif event.type == pygame.VIDEORESIZE:
                match.resize(event.w, event.h)
                renderer.surface = screen = pygame.display.get_surface()
            elif event.type == pygame.WINDOWFOCUSLOST:
                match.pause()

        keys = pygame.key.get_pressed()
        match.set_move_intent(up=keys[pygame.K_w] or keys[pygame.K_UP],
                              down=keys[pygame.K_s] or keys[pygame.K_DOWN])

        if match.state == MatchState.PLAYING and not was_playing:
            # Resuming from the menu or pause must not replay the time spent there
            scheduler.reset_clock()
        clock.tick(FPS)
        scheduler.frame(pygame.time.get_ticks() / 1000.0)
        pygame.display.flip()

    pygame.quit()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Pong against a CPU opponent")
    parser.add_argument("--level", type=int, default=1, help=f"CPU difficulty {MIN_LEVEL}-{MAX_LEVEL}")
    parser.add_argument("--win-score", type=int, default=10)
    parser.add_argument("--control", choices=[m.value for m in ControlMode], default=ControlMode.KEYBOARD.value)
    parser.add_argument("--no-smoothing", action="store_true", help="snap the paddle to the pointer")
    parser.add_argument("--width", type=int, default=FIELD_W)
    parser.add_argument("--height", type=int, default=FIELD_H)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--mute", action="store_true")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        config = MatchConfig(win_score=args.win_score, level=args.level,
                             paddle_smoothing=not args.no_smoothing, control_mode=args.control,
                             field_width=args.width, field_height=args.height, seed=args.seed)
    except ValueError as e:
        parser.error(str(e))
    game(config, mute=args.mute)
    return 0


if __name__ == "__main__":
    sys.exit(main())
