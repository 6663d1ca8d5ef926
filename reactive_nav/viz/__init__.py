from .markers import MarkerLayer, marker_positions

__all__ = ["MarkerLayer", "marker_positions"]
