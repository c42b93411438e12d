"""
Study 01: Formation Flight

A small swarm flies V, then circle, then hunts as a wolf pack.

Questions to explore:
- How fast does formation error fall under PSO?
- Does the circle hold its spacing while the center moves?
- How far do the Omegas lag behind the leaders under GWO?
"""
