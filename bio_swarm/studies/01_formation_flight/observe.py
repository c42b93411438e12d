"""
Study 01: Formation Flight Observation

Run: python -m bio_swarm.studies.01_formation_flight.observe

Three phases, one swarm:
1. V-formation under PSO, center drifting toward the target
2. Circle under PSO, new target
3. Leader-follower hunt under GWO
"""

import argparse
import logging
import time

from bio_swarm.core.agent import FormationRole
from bio_swarm.environments.config import SimulationConfig, load_config
from bio_swarm.environments.swarm_field import SwarmSimulation


def report(sim: SwarmSimulation, step: int) -> None:
    m = sim.metrics()
    print(
        f"[Step {step:3d}] Center: ({m.center_of_mass[0]:5.1f}, {m.center_of_mass[1]:5.1f}) | "
        f"Spread: {m.spread:5.1f}m | Formation Error: {m.formation_error:5.2f}m | "
        f"Min Sep: {m.min_separation:4.1f}m | Avg Speed: {m.mean_speed:4.2f} m/s"
    )


def run_study(
    n_drones: int = 10,
    phase_steps: int = 30,
    hunt_steps: int = 40,
    dt: float = 0.1,
    config_path: str = None,
    seed: int = None,
):
    """
    Fly the three phases and print how the formation holds up.
    """
    print("=" * 60)
    print(f"Study 01: Formation Flight (n={n_drones})")
    print("=" * 60)

    config = load_config(config_path) if config_path else SimulationConfig(seed=seed)
    sim = SwarmSimulation(config, drone_count=n_drones)
    started = time.monotonic()

    for drone in sim.drones:
        pos = drone.position
        print(f"  Drone {drone.id}: pos=({pos[0]:.1f}, {pos[1]:.1f}), role={drone.role.value}")

    print("\n--- Phase 1: V-Formation Flight (PSO) ---\n")
    sim.set_formation("vformation")
    for step in range(phase_steps):
        sim.step("pso", dt)
        sim.move_center_toward_target(0.5)
        if step % 10 == 0:
            report(sim, step)

    print("\n--- Phase 2: Circle Formation (PSO) ---\n")
    sim.set_formation("circle")
    sim.set_target((30.0, 30.0, 10.0)[:config.dimensions])
    for step in range(phase_steps, 2 * phase_steps):
        sim.step("pso", dt)
        sim.move_center_toward_target(0.3)
        if step % 10 == 0:
            report(sim, step)

    print("\n--- Phase 3: Leader-Follower Hunt (GWO) ---\n")
    sim.set_target((60.0, 60.0, 10.0)[:config.dimensions])
    for step in range(2 * phase_steps, 2 * phase_steps + hunt_steps):
        sim.step("gwo", dt)
        if step % 10 == 0:
            report(sim, step)
            for drone in sim.drones:
                if drone.role is not FormationRole.OMEGA:
                    print(f"   {drone.role.value}: ({drone.position[0]:5.1f}, {drone.position[1]:5.1f})")

    topology = sim.topology()
    elapsed = time.monotonic() - started

    print("\n" + "=" * 60)
    print("Observations")
    print("=" * 60)
    m = sim.metrics()
    print(f"\nFinal spread: {m.spread:.2f}m")
    print(f"Final formation error: {m.formation_error:.2f}m")
    print(f"Network: {len(topology.edges)} links, "
          f"mean quality {topology.mean_link_quality():.2f}, "
          f"connected={topology.is_connected()}")
    print(f"Elapsed: {elapsed * 1000:.1f} ms for {sim.time_step} ticks")

    print("\n" + "=" * 60)
    print("Study complete. Which formation held together best?")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Formation Flight Study")
    parser.add_argument("--drones", type=int, default=10)
    parser.add_argument("--phase-steps", type=int, default=30)
    parser.add_argument("--hunt-steps", type=int, default=40)
    parser.add_argument("--dt", type=float, default=0.1)
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    run_study(
        n_drones=args.drones,
        phase_steps=args.phase_steps,
        hunt_steps=args.hunt_steps,
        dt=args.dt,
        config_path=args.config,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
