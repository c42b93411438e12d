"""
Study 02: Optimizer Tour

Run: python -m bio_swarm.studies.02_optimizer_tour.observe

Each algorithm on its own problem:
- PSO minimizing the sphere
- GWO hunting the Rastrigin minimum
- ACO finding a way around three obstacles
"""

import argparse
import logging

from bio_swarm.optimizers.aco import ACOConfig, ACOEngine
from bio_swarm.optimizers.gwo import GWOConfig, GWOEngine
from bio_swarm.optimizers.pso import PSOConfig, PSOEngine


def run_study(
    iterations: int = 300,
    particles: int = 40,
    wolves: int = 25,
    ants: int = 20,
    guided: bool = False,
    seed: int = None,
):
    """
    Step each optimizer and report its convergence.
    """
    print("=" * 60)
    print("Study 02: Optimizer Tour")
    print("=" * 60)

    engines = [
        ("PSO (sphere)", PSOEngine(PSOConfig(num_particles=particles, seed=seed))),
        ("GWO (rastrigin)", GWOEngine(GWOConfig(num_wolves=wolves, seed=seed))),
        ("ACO (obstacles)", ACOEngine(ACOConfig(num_ants=ants, pheromone_guided=guided, seed=seed))),
    ]

    for name, engine in engines:
        print(f"\n--- {name} ---\n")
        for i in range(iterations):
            engine.step()
            if i % 50 == 0:
                _, best = engine.get_best()
                print(f"  Iter {i:4d}: best={best:.4f}")

        stats = engine.get_statistics()
        history = engine.get_history()
        print(f"\n  Final: {engine}")
        print(f"  Best cost: {stats['best_cost']:.4f}")
        if history:
            print(f"  History: first={history[0]:.4f}, last={history[-1]:.4f}")

    aco = engines[2][1]
    print("\n" + "=" * 60)
    print("Observations")
    print("=" * 60)
    print(f"\nACO completed tours: {aco.completed_tours}")
    print(f"ACO pheromone trails alive: {len(aco.pheromones)}")
    if aco.best_path_found:
        print(f"ACO best path: {len(aco.best_path)} waypoints, {aco.best_path_length:.1f} units")
    else:
        print("ACO best path: no ant reached the goal yet")

    print("\n" + "=" * 60)
    print("Study complete. Which swarm settled first?")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Optimizer Tour Study")
    parser.add_argument("--iterations", type=int, default=300)
    parser.add_argument("--particles", type=int, default=40)
    parser.add_argument("--wolves", type=int, default=25)
    parser.add_argument("--ants", type=int, default=20)
    parser.add_argument("--guided", action="store_true")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    run_study(
        iterations=args.iterations,
        particles=args.particles,
        wolves=args.wolves,
        ants=args.ants,
        guided=args.guided,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
