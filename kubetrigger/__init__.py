"""kubetrigger -- reconcile-trigger predicates for Kubernetes operators."""

__version__ = "0.1.0"
