"""Configuration loader for tabledit.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.session import DEFAULT_SEPARATOR
from .policy import DEFAULT_READONLY_KINDS

CONFIG_NAME = "tabledit.toml"


@dataclass
class SegmentConfig:
    """Segmentation and flattening."""
    keep_blank_gaps: bool = False
    separator: str = DEFAULT_SEPARATOR


@dataclass
class EditingConfig:
    """Which document kinds allow table edits."""
    readonly_kinds: list[str] = field(default_factory=lambda: list(DEFAULT_READONLY_KINDS))
    default_kind: str = "full"


@dataclass
class ExportConfig:
    """DOCX export configuration."""
    orientation: str = "portrait"
    margin_twips: int = 720
    out: Path = Path(".")


@dataclass
class ApiConfig:
    """Local JSON API configuration."""
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass
class TableditConfig:
    """Complete tabledit configuration."""
    segment: SegmentConfig
    editing: EditingConfig
    export: ExportConfig
    api: ApiConfig


def load_config(config_path: Path | None = None, document_dir: Path | None = None) -> TableditConfig:
    """
    Load configuration from tabledit.toml.
    
    Search order:
    1. config_path (if provided)
    2. cwd/tabledit.toml
    3. document_dir/tabledit.toml
    
    Args:
        config_path: Explicit path to config file
        document_dir: Directory of the document being edited
    
    Returns:
        TableditConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}
    
    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if document_dir:
        search_paths.append(document_dir / CONFIG_NAME)
    
    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break
    
    segment_data = toml_data.get("segment", {})
    segment_config = SegmentConfig(
        keep_blank_gaps=segment_data.get("keep_blank_gaps", False),
        separator=segment_data.get("separator", DEFAULT_SEPARATOR),
    )
    
    editing_data = toml_data.get("editing", {})
    editing_config = EditingConfig(
        readonly_kinds=list(editing_data.get("readonly_kinds", DEFAULT_READONLY_KINDS)),
        default_kind=editing_data.get("default_kind", "full"),
    )
    
    export_data = toml_data.get("export", {})
    orientation = export_data.get("orientation", "portrait")
    if orientation not in ("portrait", "landscape"):
        raise ValueError(f"Invalid export.orientation: {orientation!r}")
    export_config = ExportConfig(
        orientation=orientation,
        margin_twips=int(export_data.get("margin_twips", 720)),
        out=Path(export_data.get("out", ".")),
    )
    
    api_data = toml_data.get("api", {})
    api_config = ApiConfig(
        host=api_data.get("host", "127.0.0.1"),
        port=int(api_data.get("port", 8765)),
    )
    
    return TableditConfig(
        segment=segment_config,
        editing=editing_config,
        export=export_config,
        api=api_config,
    )
