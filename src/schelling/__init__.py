"""
schelling: Schelling's segregation model on a square grid.

Agents of two kinds relocate when too few of their neighbors share their
kind; segregation emerges from that local rule alone.

Core concepts:
- Each agent looks at its (up to) 8 surrounding cells
- Too few like neighbors, or no neighbors at all, makes it dissatisfied
- Dissatisfied agents jump to random vacancies, one step at a time
- The run ends when nobody wants to move
"""

__version__ = "0.1.0"
