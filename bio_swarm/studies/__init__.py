"""
Studies: Structured experiments for understanding.

Each study begins with observation, not hypothesis.

Study progression:
1. Formation flight - understand the drone layer
2. Optimizer tour - understand the three algorithms on their own
"""
