# config/resolvers.py
from pathlib import Path
from typing import Optional, Sequence, Tuple, List

from platformdirs import user_config_dir

from sitescore.domain.exceptions import ConfigurationError

APP = "sitescore"
CONFIG_FILENAME = "scoring.json"
INPUT_EXTENSIONS = (".json",)

def default_config_path() -> Path:
    return Path(user_config_dir(APP)) / CONFIG_FILENAME

def resolve_config_path(config_path: Optional[str] = None) -> Optional[Path]:
    """
    Decide which scoring config file applies to this run:
    - an explicit path must exist;
    - otherwise the per-user default is used when present;
    - otherwise None and the built-in defaults apply.
    """
    if config_path:
        p = Path(config_path)
        if not p.is_file():
            raise ConfigurationError(
                f"Scoring config not found: {p}",
                config_field="config"
            ).add_suggestion(f"Create the file or drop --config to use {default_config_path()}")
        return p

    p = default_config_path()
    return p if p.is_file() else None

def resolve_input_files(
    inputs: Optional[Sequence[str]] = None,
    input_dir: Optional[str] = None,
    recursive: bool = False,
    extensions: Tuple[str, ...] = INPUT_EXTENSIONS,
) -> Tuple[str, ...]:
    """Explicit files or a directory scan, resolved, sorted and de-duplicated."""
    if inputs and input_dir:
        raise ConfigurationError(
            "Specify either explicit input files or input_dir, not both.",
            config_field="input_sources"
        )

    if input_dir:
        base = Path(input_dir)
        if not base.is_dir():
            raise ConfigurationError(
                f"--input-dir is not a directory: {base}",
                config_field="input_dir"
            )
        pattern = "**/*" if recursive else "*"
        found: List[Path] = [
            p.resolve() for p in base.glob(pattern)
            if p.is_file() and p.suffix.lower() in extensions
        ]
        files = tuple(sorted({str(p) for p in found}))
        if not files:
            rec = " recursively" if recursive else ""
            raise ConfigurationError(
                f"No files with extensions ({', '.join(extensions)}) found in {base}{rec}.",
                config_field="input_dir"
            ).add_suggestion("Check the directory path and file extensions")
        return files

    if inputs:
        files = []
        for item in inputs:
            p = Path(item)
            if not p.is_file():
                raise ConfigurationError(
                    f"Input file not found: {item}",
                    config_field="input"
                )
            if p.suffix.lower() not in extensions:
                raise ConfigurationError(
                    f"Unsupported input extension for {item} (allowed: {', '.join(extensions)})",
                    config_field="input"
                )
            files.append(str(p.resolve()))
        return tuple(sorted(set(files)))

    raise ConfigurationError(
        "No inputs provided. Use --input or --input-dir.",
        config_field="input_sources"
    )
