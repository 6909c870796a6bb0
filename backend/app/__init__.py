"""FastAPI surface of the SymSolver math engine."""
