"""
Command line entry point: cluster a CSV edge list and write node labels.
"""
import click
import numpy as np
import pandas as pd

from .chinese_whispers import ChineseWhispers
from .config import ChineseWhispersConfig
from .edges import as_node_ids


def load_edge_table(path, source_col, target_col, weight_col=None, sep=','):
    """Read an edge list and return (sources, targets, weights) arrays."""
    df = pd.read_csv(path, sep=sep)
    wanted = [source_col, target_col] + ([weight_col] if weight_col else [])
    missing = [c for c in wanted if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in {path}: {', '.join(missing)}")

    sources = as_node_ids(df[source_col].to_numpy())
    targets = as_node_ids(df[target_col].to_numpy())
    weights = df[weight_col].to_numpy(dtype=np.float64) if weight_col else None
    return sources, targets, weights


@click.command()
@click.option('--input', 'input_path', type=click.Path(exists=True, dir_okay=False), required=True,
              help="CSV file with one edge per row.")
@click.option('--source-col', type=str, default='source', show_default=True,
              help="Column holding the first node index of each edge.")
@click.option('--target-col', type=str, default='target', show_default=True,
              help="Column holding the second node index of each edge.")
@click.option('--weight-col', type=str, default=None,
              help="Column holding edge weights (default: every edge weighs 1.0).")
@click.option('--sep', type=str, default=',', show_default=True,
              help="Field separator of the input file.")
@click.option('--iterations', type=click.IntRange(min=0), default=100, show_default=True,
              help="Propagation steps per node.")
@click.option('--seed', type=int, default=None,
              help="Random seed for reproducible clusterings.")
@click.option('--output', 'output_path', type=click.Path(dir_okay=False), default=None,
              help="Where to write the node,cluster CSV (default: stdout).")
@click.option('--timing/--no-timing', default=False,
              help="Print per-phase timing statistics.")
@click.option('--verbose/--quiet', default=False,
              help="Print progress while clustering.")
def main(input_path, source_col, target_col, weight_col, sep, iterations, seed,
         output_path, timing, verbose):
    """Cluster the nodes of a weighted edge list with Chinese Whispers."""
    config = ChineseWhispersConfig(num_iterations=iterations, random_state=seed,
                                   verbose=verbose)

    try:
        sources, targets, weights = load_edge_table(
            input_path, source_col, target_col, weight_col, sep=sep
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--input'")

    cw = ChineseWhispers.from_config(config)
    try:
        cw.add_edges(sources, targets, weights)
        n_clusters = cw.run()
    except ValueError as e:
        raise click.ClickException(str(e))

    labels = cw.get_labels()
    result = pd.DataFrame({'node': np.arange(labels.shape[0]), 'cluster': labels})

    if output_path:
        result.to_csv(output_path, index=False)
        click.echo(f"Nodes: {cw.n_nodes:,}", err=True)
        click.echo(f"Edges: {len(sources):,}", err=True)
        click.echo(f"Clusters: {n_clusters:,}", err=True)
        click.echo(f"Labels saved to: {output_path}", err=True)
    else:
        click.echo(result.to_csv(index=False), nl=False)

    if timing:
        click.echo(cw.timing_report(), err=True)


if __name__ == '__main__':
    main()
