# main.py
"""
Main entry point for the Particle Life simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json` (or the path given as the
   first command-line argument).
2. Initializes the logging system.
3. Builds the parameters, the particle population and the simulation.
4. Runs the main simulation loop, with or without a window.
5. Handles clean shutdown.
"""
import cProfile
import io
import logging
import pstats
import sys
from typing import List, Optional

from constants import FPS
from utils import setup_logging, load_config

DEFAULT_CONFIG_PATH = 'config.json'


def run(config: dict) -> None:
    """
    Runs a simulation described by a loaded configuration.

    Raises:
        ValueError: On an invalid configuration.
        RuntimeError: If the simulation reaches a non-finite state.
    """
    from parameters import SimulationParameters
    from particle import ParticleSystem
    from simulation import Simulation

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    params = SimulationParameters.from_dict(sim_params)
    logging.debug(f"Simulation parameters: {params.as_dict()}")

    log_throttle = max(1, run_params.get('log_throttle_steps', 100))
    max_steps = run_params.get('max_steps')
    headless = run_params.get('headless', False)
    if headless and not max_steps:
        msg = "Configuration error: headless runs need run_control.max_steps."
        logging.critical(msg)
        raise ValueError(msg)

    # --- Component Initialization ---
    particles = ParticleSystem(params)
    sim = Simulation(particles, params)

    visualizer = None
    if not headless:
        from visualization import Visualizer
        visualizer = Visualizer(
            params,
            colors=vis_params.get('particle_colors'),
            fps=vis_params.get('fps_cap', FPS)
        )

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    running = True
    if profiler:
        profiler.enable()
    try:
        while running:
            sim.step()

            # The visualizer returns False once the user closes the window.
            if visualizer is not None and not visualizer.draw(particles):
                running = False

            # Hot loops must throttle logs
            if sim.step_count % log_throttle == 0:
                if max_steps:
                    logging.info(f"Simulation step {sim.step_count}/{max_steps}")
                else:
                    logging.info(f"Simulation step {sim.step_count}")
                if visualizer is not None:
                    logging.debug(f"Step {sim.step_count} | FPS: {visualizer.fps:.1f}")
                logging.debug(f"Step {sim.step_count} | Average Velocity: {sim.average_speed():.4f}")

            if max_steps and sim.step_count >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                running = False
    finally:
        if profiler:
            profiler.disable()
        if visualizer is not None:
            visualizer.close()

    logging.info(f"Simulation loop finished after {sim.step_count} steps.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main function to run the simulation. Returns the process exit status.
    """
    argv = sys.argv[1:] if argv is None else argv
    config_path = argv[0] if argv else DEFAULT_CONFIG_PATH

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Particle Life Simulation Starting ---")
    try:
        run(config)
    except (ValueError, RuntimeError) as e:
        logging.critical(f"Simulation halted: {e}")
        return 1

    logging.info("--- Particle Life Simulation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
