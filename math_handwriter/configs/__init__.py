from .settings import AnimationConfig, HandwriterConfig, replace_config
from .logging_setup import setup_logging

__all__ = [
    'AnimationConfig',
    'HandwriterConfig',
    'replace_config',
    'setup_logging',
]
