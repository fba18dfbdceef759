#main.py

import pygame
import cProfile
import pstats
import constants as C
from forces import PointerAttractor
from garden import Garden
from renderer import draw_garden
import logger

def initialize_simulation():
    logger.log("Initializing pygame...")
    pygame.init()

    logger.log(f"Opening a {C.SCREEN_WIDTH}x{C.SCREEN_HEIGHT} window.")
    screen = pygame.display.set_mode((C.SCREEN_WIDTH, C.SCREEN_HEIGHT))
    pygame.display.set_caption("Procedural Garden")
    font = pygame.font.Font(None, C.UI_FONT_SIZE)
    logger.log("Window and HUD font ready.")
    return screen, font

def build_hud_lines(garden, attractor, debug):
    return [
        garden.time_manager.get_display_string(),
        f"Plants: {len(garden)}/{garden.max_plants} | Theme: {garden.current_theme}",
        f"Particles: {garden.get_particle_count()} | Springs: {garden.get_spring_count()}",
        f"Wind: {'on' if garden.wind.enabled else 'off'} | Attractor: {'on' if attractor.enabled else 'off'} | Debug: {'on' if debug else 'off'}",
    ]

def run_simulation():
    screen, font = initialize_simulation()
    clock = pygame.time.Clock()
    garden = Garden(C.SCREEN_WIDTH, C.SCREEN_HEIGHT)
    logger.set_time_manager(garden.time_manager)
    attractor = PointerAttractor()
    debug = False
    show_debug_log = C.LOG_SHOW_DEBUG

    logger.log("Garden ready. Entering main loop.")
    logger.log("CONTROLS: [LMB] Plant, [RMB] Attract, [T] Theme, [M] Plant several, [C] Clear, [R] Reset, "
               "[W] Wind, [A] Attractor, [D] Debug, [L] Debug log, [SPACE] Pause, [0-4] Speed.")

    accumulator = 0.0
    running = True
    while running:
        # --- Get Real Time ---
        # Capped to prevent a "spiral of death" if a frame takes too long.
        real_delta_seconds = min(clock.tick(C.CLOCK_TICK_RATE) / C.MILLISECONDS_PER_SECOND, C.MAX_FRAME_DELTA_SECONDS)

        # --- Event Handling ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT: running = False
            if event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1: garden.create_plant(event.pos[0], garden.ground_y)
                elif event.button == 3: attractor.press(*event.pos)
            if event.type == pygame.MOUSEBUTTONUP and event.button == 3:
                attractor.release()
            if event.type == pygame.MOUSEMOTION:
                attractor.move(*event.pos)
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_t: garden.cycle_theme()
                if event.key == pygame.K_m: garden.schedule_plants(C.GARDEN_MAX_SCHEDULED_PLANTS)
                if event.key == pygame.K_c: garden.clear_plants()
                if event.key == pygame.K_r: garden.reset()
                if event.key == pygame.K_w: garden.wind.toggle()
                if event.key == pygame.K_a: attractor.toggle()
                if event.key == pygame.K_d: debug = not debug
                if event.key == pygame.K_l:
                    show_debug_log = not show_debug_log
                    logger.set_show_debug(show_debug_log)
                if event.key == pygame.K_SPACE: garden.time_manager.toggle_pause()
                if event.key == pygame.K_0: garden.time_manager.set_speed(0)
                if event.key == pygame.K_1: garden.time_manager.set_speed(1)
                if event.key == pygame.K_2: garden.time_manager.set_speed(2)
                if event.key == pygame.K_3: garden.time_manager.set_speed(3)
                if event.key == pygame.K_4: garden.time_manager.set_speed(4)

        # --- Simulation Logic (fixed ticks) ---
        accumulator += garden.time_manager.get_scaled_delta_time(real_delta_seconds)
        ticks = 0
        while accumulator >= C.SIMULATION_TICK_INTERVAL_SECONDS and ticks < C.MAX_TICKS_PER_FRAME:
            for source in attractor.sources():
                garden.add_force_source(source)
            garden.update(C.SIMULATION_TICK_INTERVAL_SECONDS)
            accumulator -= C.SIMULATION_TICK_INTERVAL_SECONDS
            ticks += 1
        if ticks == C.MAX_TICKS_PER_FRAME:
            # Drop the backlog rather than fall further behind.
            accumulator = 0.0

        # --- Drawing ---
        draw_garden(screen, garden, font, debug=debug, attractor_sources=attractor.sources(),
                    hud_lines=build_hud_lines(garden, attractor, debug))
        pygame.display.flip()

    garden.clear_plants()
    logger.log("Main loop ended; garden cleared.")

def shutdown_simulation():
    logger.log("Shutting down pygame...")
    pygame.quit()
    logger.log("Shutdown complete.")

def main():
    logger.log("--- Procedural Garden Start ---")
    run_simulation()
    shutdown_simulation()
    logger.log("--- Procedural Garden Exit ---")

if __name__ == '__main__':
    profiler = cProfile.Profile()
    try:
        profiler.run('main()')
    except SystemExit:
        # Lets the simulation exit cleanly without a profiler error
        pass
    finally:
        print("\n\n--- PROFILER REPORT ---")
        stats = pstats.Stats(profiler)
        stats.sort_stats(pstats.SortKey.CUMULATIVE)
        stats.print_stats(C.PROFILER_PRINT_LINE_COUNT)
