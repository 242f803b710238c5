"""Configuration for the 2D boids flocking simulation."""

WINDOW = {
    "width": 1200,
    "height": 800,
    "title": "Boid Flocking Simulation",
    "fps": 60,
}

BOIDS = {
    "count": 1000,
    "max_speed": 2.5,           # Velocity is renormalized to this every tick
    "max_force": 0.1,           # Clamp for each steering rule
    "size": 10.0,               # Nose length of the rendered triangle

    # Flocking behavior
    "neighbor_radius": 100.0,   # Alignment and cohesion range
    "separation_radius": 20.0,  # Crowding range
    "separation_weight": 0.2,
    "alignment_weight": 0.1,
    "cohesion_weight": 0.5,
    "initial_velocity_range": 2,  # Initial velocity components in [-n, n]
}

SIMULATION = {
    "seed": None,               # None draws fresh entropy each run
    "backend": "numba",         # "numba" or "python"
    "neighbors": "brute",       # "brute" or "grid"
}

COLORS = {
    "background": (0.96, 0.96, 0.96, 1.0),
    "boid": (0.0, 0.47, 0.95),
    "text": (40, 40, 40),
}
