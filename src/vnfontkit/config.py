"""Configuration model for the vnfontkit converter.

Provides ``ConverterConfig`` with all tunable parameters and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

import yaml
from pydantic import BaseModel

from vnfontkit.models import Encoding


class ConverterConfig(BaseModel):
    """All tunable parameters with sensible defaults for a conversion run."""

    # --- Identity ---
    parser_version: str = "vnfontkit:1.0.0"

    # --- Decoding ---
    source_encoding: Encoding = Encoding.AUTO
    uppercase_tcvn3_h_fonts: bool = True

    # --- Fonts ---
    default_font: str = "Arial"
    font_map: dict[str, str] = {}

    # --- Concurrency ---
    worker_count: int = 10
    job_queue_size: int = 100
    result_queue_size: int = 100

    # --- Output ---
    output_infix: str = "_output_"
    output_timestamp_format: str = "%Y_%m_%d_%H_%M_%S"

    # --- Logging / PII Safety ---
    log_cell_text: bool = False

    @classmethod
    def from_file(cls, path: str) -> ConverterConfig:
        """Load overrides from a ``.yaml``, ``.yml`` or ``.json`` file.

        Keys absent from the file keep their defaults; an empty file gives
        the default configuration.
        """
        file_path = pathlib.Path(path)
        loader = _LOADERS.get(file_path.suffix.lower())
        if loader is None:
            raise ValueError(
                f"Unsupported config file extension '{file_path.suffix}'. "
                "Use .yaml, .yml, or .json."
            )
        with file_path.open(encoding="utf-8") as fh:
            return cls.model_validate(loader(fh) or {})


_LOADERS = {".yaml": yaml.safe_load, ".yml": yaml.safe_load, ".json": json.load}
