"""
Frame scheduler: simulation ticks plus one render per display frame.
"""
import math
import time

from pong_physics import FRAME_DT

# Longest stretch a single frame may simulate after a stall
MAX_FRAME_DT = 1 / 20


class FrameScheduler:
    def __init__(self, controller, render=None, clock=time.perf_counter, max_dt=MAX_FRAME_DT):
        self.controller = controller
        self.render = render
        self.clock = clock
        self.max_dt = max_dt
        self.last_time = None
        self.frame_count = 0

    def tick(self, dt):
        """Simulate `dt` seconds and render. Returns True if the match advanced.

        Long frames are split into steps of at most one nominal frame, so the
        ball never moves further per step than a paddle can catch.
        """
        dt = min(max(dt, 0.0), self.max_dt)
        steps = max(1, math.ceil(dt / FRAME_DT - 1e-9))
        advanced = False
        for _ in range(steps):
            # Stops once a point ends the match or the state otherwise leaves play
            if not self.controller.tick(dt / steps):
                break
            advanced = True
        if self.render is not None:
            self.render(self.controller.snapshot())
        self.frame_count += 1
        return advanced

    def frame(self, now=None):
        """Frame callback: derive dt from the previous call's timestamp."""
        if now is None:
            now = self.clock()
        dt = 0.0 if self.last_time is None else now - self.last_time
        self.last_time = now
        return self.tick(dt)

    def reset_clock(self):
        # Next frame starts fresh instead of simulating the time spent away
        self.last_time = None
