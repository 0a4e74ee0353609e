"""Static HTML publisher for parsed documentation records."""

from .config import ConfigError, PublishOptions, TemplateConfig, load_config
from .models import Doclet, DocletMeta, DocletType, Example, Param
from .publisher import Publisher, publish
from .store import DocletStore
from .tutorials import Tutorial

__all__ = [
    "ConfigError",
    "Doclet",
    "DocletMeta",
    "DocletStore",
    "DocletType",
    "Example",
    "Param",
    "PublishOptions",
    "Publisher",
    "TemplateConfig",
    "Tutorial",
    "load_config",
    "publish",
]
