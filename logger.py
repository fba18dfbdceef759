# logger.py

import constants as C

# The simulation clock used for timestamps, registered by whoever owns it.
_time_manager = None
_show_debug = C.LOG_SHOW_DEBUG

def set_time_manager(tm):
    """Registers the TimeManager whose clock prefixes every log line."""
    global _time_manager
    _time_manager = tm

def set_show_debug(enabled):
    """Turns 'DEBUG' lines on or off. Warnings, errors and events are always printed."""
    global _show_debug
    _show_debug = enabled

def timestamp(tm):
    minutes = int(tm.total_sim_seconds // 60)
    seconds = tm.total_sim_seconds % 60
    return f"[t={minutes:03d}:{seconds:05.2f} #{tm.tick_count:06d}]"

def log(message):
    """Prints a message, stamped with sim time and tick once the clock has started."""
    if not _show_debug and message.startswith("DEBUG"):
        return

    if _time_manager and _time_manager.total_sim_seconds > 0:
        print(f"{timestamp(_time_manager)} {message}")
    else:
        print(f"[Sim Start] {message}")
