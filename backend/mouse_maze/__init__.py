"""Mouse Maze: micromouse maze model and maze workshop API."""
