from geocore.core.services.geocore import Geocore

__all__ = ["Geocore"]
