from .loader import load_global_config
from .model import BackendConfig, GlobalConfig

__all__ = ["BackendConfig", "GlobalConfig", "load_global_config"]
