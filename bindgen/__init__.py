"""P/Invoke boundary binding generator package."""

from .api import (  # noqa: F401
    load_declarations,
    generate_source,
    generate_bindings,
    declaration_stats,
)
from .generator import PInvokeGenerator  # noqa: F401
from .gen_types import GeneratorConfig, GenerationResult, GenerationStats  # noqa: F401
