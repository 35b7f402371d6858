"""
Core domain model for the delivery promise orchestrator.

Reference network data (nodes, carriers) and the scenario value object
that every computation starts from.
"""
