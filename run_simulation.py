#!/usr/bin/env python3
"""Entry point for running the house automation console simulation."""

from simulation.sim_house import run_simulation

if __name__ == "__main__":
    run_simulation()
