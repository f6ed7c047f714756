from .loader import WireConfig, load_config

__all__ = ["WireConfig", "load_config"]
