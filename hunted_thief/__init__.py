"""hunted_thief — puzzle-resolution kernel for a sokoban-style grid game."""
