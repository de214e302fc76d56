"""Frontier: best-first chess move search under a node-expansion budget."""
