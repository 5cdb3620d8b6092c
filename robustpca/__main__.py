"""
Command line entry point for robustpca.

Reads a CSV file (row labels from the ``--index-col`` column when
given), runs the PCA and writes the results as JSON or YAML.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import pandas as pd
import yaml

from robustpca.components.config import Config, ConfigManager, to_int_list
from robustpca.components.options import option_names
from robustpca.errors import RobustPCAError
from robustpca.math.named_matrix import NamedMatrix
from robustpca.math.pca import pca_fs_named_matrix
from robustpca.report import format_report, results_to_serializable

logger = logging.getLogger(__name__)


def setup_logging(level: str = 'INFO') -> None:
    """
    Set up logging.
    
    Args:
        level: Logging level name; unknown names fall back to WARNING
    """
    numeric_level = getattr(logging, str(level).upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )
    logging.getLogger().setLevel(numeric_level)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.
    
    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description='Robust Principal Component Analysis',
        epilog=f"Recognized PCA options: {', '.join(option_names())}"
    )
    
    parser.add_argument('data', help='CSV file with one observation per row')
    
    parser.add_argument(
        '--index-col',
        type=int,
        help='Column holding row labels'
    )
    
    parser.add_argument(
        '--config',
        help='Path to configuration file (JSON or YAML)'
    )
    
    parser.add_argument(
        '--standardize',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Use the correlation matrix (default) or the covariance matrix'
    )
    
    parser.add_argument(
        '--num-components',
        type=int,
        help='Number of components to retain'
    )
    
    parser.add_argument(
        '--bdp',
        type=float,
        help='Breakdown point for the MCD robust subset'
    )
    
    parser.add_argument(
        '--bsb',
        help='Comma separated 0-based row indices forming the fitting subset'
    )
    
    parser.add_argument(
        '--output',
        help='Write results to this file (.json, .yaml or .yml); stdout if omitted'
    )
    
    parser.add_argument(
        '--report',
        action='store_true',
        help='Print the text report'
    )
    
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (default: LOG_LEVEL or the configuration file, else WARNING)'
    )
    
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """
    Build the run configuration from defaults, environment, file and flags.
    
    Args:
        args: Parsed arguments
        
    Returns:
        Config instance
    """
    overrides = build_overrides(args)
    config = ConfigManager.get_config()
    if args.config:
        config.load_from_file(args.config, overrides)
    else:
        config.load_config(overrides)
    return config


def build_overrides(args: argparse.Namespace) -> dict:
    """
    Collect configuration overrides from command line arguments.
    
    Args:
        args: Parsed arguments
        
    Returns:
        Nested overrides dictionary
    """
    overrides = {}
    pca = {}
    
    if args.standardize is not None:
        pca['standardize'] = args.standardize
    if args.num_components is not None:
        pca['num-components'] = args.num_components
    if args.bdp is not None:
        pca['bdp'] = args.bdp
    if args.bsb:
        bsb = to_int_list(args.bsb)
        if bsb is None:
            raise ValueError(f"Could not parse --bsb value: {args.bsb}")
        pca['bsb'] = bsb
    
    if pca:
        overrides['pca'] = pca
    if args.report:
        overrides['output'] = {'report': True}
    if args.log_level:
        overrides['logging'] = {'level': args.log_level}
    return overrides


def write_results(payload: dict, filepath: Optional[str], fmt: str) -> None:
    """
    Write serialized results to a file or stdout.
    
    Args:
        payload: Serializable results
        filepath: Output path, or None for stdout
        fmt: Format used for stdout ('json' or 'yaml')
    """
    if filepath is None:
        if fmt == 'yaml':
            yaml.safe_dump(payload, sys.stdout, default_flow_style=False)
        else:
            json.dump(payload, sys.stdout, indent=2)
            sys.stdout.write('\n')
    elif filepath.endswith('.json'):
        with open(filepath, 'w') as f:
            json.dump(payload, f, indent=2)
    elif filepath.endswith('.yaml') or filepath.endswith('.yml'):
        with open(filepath, 'w') as f:
            yaml.safe_dump(payload, f, default_flow_style=False)
    else:
        raise ValueError(f"Unsupported output format: {filepath}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    
    try:
        config = load_config(args)
        setup_logging(config.get('logging.level', 'warning'))
        nmat = NamedMatrix(pd.read_csv(args.data, index_col=args.index_col))
    except (ValueError, OSError, yaml.YAMLError) as e:
        logger.error(f"Could not load input: {e}")
        return 1
    
    try:
        results, tables = pca_fs_named_matrix(nmat, config.pca_options())
    except RobustPCAError as e:
        logger.error(f"PCA failed: {e}")
        return 1
    
    report = config.get('output.report')
    if report:
        print(format_report(results, tables))
    
    if args.output or not report:
        payload = results_to_serializable(results, list(tables['score'].index), nmat.colnames())
        write_results(payload, args.output, config.get('output.format', 'json'))
    return 0


if __name__ == '__main__':
    sys.exit(main())
