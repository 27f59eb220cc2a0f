"""Engine — parsing, guarding, rendering and dispatching action files."""
