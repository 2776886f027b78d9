"""
Configuration file support for the exprheatmap CLI.

Supports YAML and JSON config files with CLI argument override.

Example ``heatmap.yaml``:

```yaml
input: Rorb_p2_TPM.csv
output: figures/rorb.png
genes: [Rorb, Plxnd1, Has2, Sparcl1, Pde1a, Has3]
samples: [HTp2_1, HTp2_2, KOp2_1, KOp2_2]
transform:
  log2: true
  scale_genes: true
  baseline_group: [HTp2_1, HTp2_2]
color:
  min: -2
  max: 2
  palette: diverging
figure:
  backend: plotly
  title: Rorb targets
```
"""

import json
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


# (section, key) -> argparse dest; section None is the top level
CONFIG_TO_ARG = {
    (None, 'input'): 'input',
    (None, 'output'): 'output',
    (None, 'export'): 'export',
    (None, 'genes'): 'genes',
    (None, 'genes_file'): 'genes_file',
    (None, 'samples'): 'samples',
    ('transform', 'log2'): 'log2',
    ('transform', 'scale_genes'): 'scale_genes',
    ('transform', 'baseline_group'): 'baseline_group',
    ('color', 'min'): 'min_val',
    ('color', 'max'): 'max_val',
    ('color', 'palette'): 'palette',
    ('color', 'n_colors'): 'n_colors',
    ('figure', 'backend'): 'backend',
    ('figure', 'title'): 'title',
    ('figure', 'height_per_gene'): 'height_per_gene',
    ('figure', 'width'): 'width',
    ('figure', 'ytick_size'): 'ytick_size',
    ('figure', 'ytick_color'): 'ytick_color',
    ('figure', 'style'): 'style',
}

PATH_ARGS = {'input', 'output', 'export', 'genes_file'}
SECTIONS = {'transform', 'color', 'figure'}
VALID_BACKENDS = ['plotly', 'static']
VALID_STYLES = ['paper', 'presentation', 'notebook']

SHORT_TO_LONG = {
    'i': 'input',
    'o': 'output',
    'g': 'genes',
    's': 'samples',
    'c': 'config',
}


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters:
        config_path: Path to config file (.yaml, .yml, or .json)

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported or invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    try:
        with open(config_path, 'r') as f:
            if suffix in ('.yaml', '.yml'):
                config = yaml.safe_load(f)
            elif suffix == '.json':
                config = json.load(f)
            else:
                raise ValueError(
                    f"Unsupported config format: {suffix}. "
                    f"Use .yaml, .yml, or .json"
                )
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ValueError("Config file must contain a dictionary/mapping at top level")

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Raises:
        ValueError: If configuration has unknown keys or invalid values
    """
    top_level = {key for section, key in CONFIG_TO_ARG if section is None}
    for key, value in config.items():
        if key in SECTIONS:
            if not isinstance(value, dict):
                raise ValueError(f"Config section '{key}' must be a mapping")
            known = {k for section, k in CONFIG_TO_ARG if section == key}
            unknown = sorted(set(value) - known)
            if unknown:
                raise ValueError(
                    f"Unknown keys in config section '{key}': {', '.join(unknown)}"
                )
        elif key not in top_level:
            raise ValueError(f"Unknown config key: '{key}'")

    for list_key in ('genes', 'samples'):
        if list_key in config and config[list_key] is not None:
            if not isinstance(config[list_key], list):
                raise ValueError(f"'{list_key}' must be a list of labels")

    transform = config.get('transform', {})
    group = transform.get('baseline_group')
    if group is not None and not isinstance(group, list):
        raise ValueError("'transform.baseline_group' must be a list of sample labels")

    figure = config.get('figure', {})
    if 'backend' in figure and figure['backend'] not in VALID_BACKENDS:
        raise ValueError(
            f"Invalid backend '{figure['backend']}'. "
            f"Choose from: {', '.join(VALID_BACKENDS)}"
        )
    if 'style' in figure and figure['style'] not in VALID_STYLES:
        raise ValueError(
            f"Invalid style '{figure['style']}'. "
            f"Choose from: {', '.join(VALID_STYLES)}"
        )
    for key in ('height_per_gene', 'width', 'ytick_size'):
        if key in figure:
            value = figure[key]
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"'figure.{key}' must be a positive integer, got: {value}")

    color = config.get('color', {})
    for key in ('min', 'max'):
        if key in color and color[key] is not None:
            if not isinstance(color[key], (int, float)):
                raise ValueError(f"'color.{key}' must be a number, got: {color[key]}")
    n_colors = color.get('n_colors')
    if n_colors is not None and (not isinstance(n_colors, int) or n_colors < 2):
        raise ValueError(f"'color.n_colors' must be an integer >= 2, got: {n_colors}")


def explicit_arg_names(cli_args: Optional[List[str]]) -> set:
    """Names (argparse dests) of options the user typed on the command line."""
    explicit = set()
    for arg in cli_args or []:
        if arg.startswith('--'):
            explicit.add(arg[2:].split('=', 1)[0].replace('-', '_'))
        elif arg.startswith('-') and len(arg) == 2 and arg[1] in SHORT_TO_LONG:
            explicit.add(SHORT_TO_LONG[arg[1]])
    return explicit


def _merge_value(cli_value: Any, config_value: Any, was_explicitly_set: bool) -> Any:
    """
    Merge a single config value with CLI argument.

    Rules:
    - CLI args ALWAYS override config if explicitly set
    - If CLI arg not set, use config value
    - If neither set, keep CLI default
    """
    if was_explicitly_set:
        return cli_value

    if config_value is not None:
        return config_value

    return cli_value


def merge_config_with_args(config: Dict[str, Any], args: Namespace, cli_args: Optional[List[str]] = None) -> Namespace:
    """
    Merge config file values with CLI arguments.

    Priority (highest to lowest):
    1. Explicitly provided CLI arguments
    2. Config file values
    3. CLI argument defaults

    Keys whose argument the current command does not define are ignored, so
    one config file serves both ``heatmap`` and ``prepare``.

    Parameters:
        config: Configuration dictionary from load_config()
        args: Parsed CLI arguments (argparse.Namespace)
        cli_args: Raw CLI arguments list (for detecting explicit values)
                  If None, assumes all args are defaults

    Returns:
        Updated Namespace with merged values
    """
    explicit_args = explicit_arg_names(cli_args)
    merged = Namespace(**vars(args))

    for (section, key), arg_name in CONFIG_TO_ARG.items():
        source = config if section is None else config.get(section, {})
        if key not in source or not hasattr(merged, arg_name):
            continue

        config_value = source[key]
        if config_value is not None and arg_name in PATH_ARGS:
            config_value = Path(config_value)

        setattr(
            merged,
            arg_name,
            _merge_value(getattr(merged, arg_name), config_value, arg_name in explicit_args),
        )

    return merged
