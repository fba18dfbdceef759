#time_manager.py

import constants as C
import logger as log

class TimeManager:
    """Simulation clock. Real frame time is scaled by the speed level, then spent in fixed ticks."""
    def __init__(self, speed_level=C.DEFAULT_TIME_MULTIPLIER_LEVEL):
        self.total_sim_seconds = 0.0
        self.tick_count = 0
        self.is_paused = False
        self.speed_level = speed_level
        self.current_multiplier = C.TIME_MULTIPLIERS[speed_level]

    def get_scaled_delta_time(self, real_delta_seconds):
        if self.is_paused:
            return 0.0
        return real_delta_seconds * self.current_multiplier

    def advance_tick(self, tick_seconds=C.SIMULATION_TICK_INTERVAL_SECONDS):
        self.total_sim_seconds += tick_seconds
        self.tick_count += 1

    def reset(self):
        """Rewinds the clock to zero. Pause state and speed are kept."""
        self.total_sim_seconds = 0.0
        self.tick_count = 0
        log.log("Event: Simulation clock reset.")

    def toggle_pause(self):
        self.is_paused = not self.is_paused
        log.log(f"Event: Simulation {'paused' if self.is_paused else 'resumed'}.")

    def set_speed(self, level):
        if level not in C.TIME_MULTIPLIERS:
            log.log(f"WARNING: Ignoring unknown speed level {level}.")
            return
        self.speed_level = level
        self.current_multiplier = C.TIME_MULTIPLIERS[level]
        log.log(f"Event: Simulation speed set to level {level} (x{self.current_multiplier}).")

    def get_display_string(self):
        minutes, seconds = divmod(int(self.total_sim_seconds), 60)
        speed_str = "PAUSED" if self.is_paused else f"x{self.current_multiplier}"
        return f"Time: {minutes:02d}:{seconds:02d} | Tick: {self.tick_count} | Speed: {speed_str}"
