"""
Flowgraph Workflow Engine

Executes user-defined automations modelled as directed graphs of typed nodes
connected by routed edges, producing an ordered, timestamped execution trace.
"""

__version__ = "1.0.0"
