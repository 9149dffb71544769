"""FleetOps - metriques trajets et rapports flotte / trip metrics and fleet reporting."""

__version__ = "0.1.0"
