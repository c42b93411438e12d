"""
Study 02: Optimizer Tour

PSO on the sphere, GWO on Rastrigin, ACO around obstacles.

Questions to explore:
- How quickly does each algorithm stop improving?
- Does pheromone guidance shorten the ants' best path?
"""
