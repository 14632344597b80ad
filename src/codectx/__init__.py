"""codectx: staleness tracking for generated source skeletons."""

__version__ = "0.1.0"
