"""Tests for the chinese-whispers command."""

import pandas as pd
from click.testing import CliRunner

from chinese_whispers.cli import load_edge_table, main


def write_edges(path, text):
    path.write_text(text)
    return str(path)


def test_labels_to_stdout(tmp_path):
    edges = write_edges(tmp_path / "edges.csv",
                        "source,target,weight\n0,1,1.0\n2,3,2.0\n")
    result = CliRunner().invoke(main, ["--input", edges, "--weight-col", "weight",
                                       "--seed", "0", "--iterations", "10"])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["node,cluster", "0,0", "1,0", "2,1", "3,1"]


def test_labels_to_file(tmp_path):
    edges = write_edges(tmp_path / "edges.tsv", "a\tb\n0\t1\n1\t2\n4\t4\n")
    out = tmp_path / "labels.csv"
    result = CliRunner().invoke(main, ["--input", edges, "--sep", "\t",
                                       "--source-col", "a", "--target-col", "b",
                                       "--seed", "1", "--output", str(out), "--timing"])
    assert result.exit_code == 0, result.output
    labels = pd.read_csv(out)
    assert labels["node"].tolist() == [0, 1, 2, 3, 4]
    assert labels["cluster"].tolist() == [0, 0, 0, 1, 2]
    assert "Clusters: 3" in result.output
    assert "Timing Statistics" in result.output


def test_missing_column(tmp_path):
    edges = write_edges(tmp_path / "edges.csv", "u,v\n0,1\n")
    result = CliRunner().invoke(main, ["--input", edges])
    assert result.exit_code == 2
    assert "Missing columns" in result.output


def test_negative_iterations_rejected(tmp_path):
    edges = write_edges(tmp_path / "edges.csv", "source,target\n0,1\n")
    result = CliRunner().invoke(main, ["--input", edges, "--iterations", "-1"])
    assert result.exit_code == 2


def test_negative_node_index(tmp_path):
    edges = write_edges(tmp_path / "edges.csv", "source,target\n0,-1\n")
    result = CliRunner().invoke(main, ["--input", edges])
    assert result.exit_code == 1
    assert "non-negative" in result.output


def test_load_edge_table_default_weights(tmp_path):
    edges = write_edges(tmp_path / "edges.csv", "source,target\n0,1\n1,2\n")
    sources, targets, weights = load_edge_table(edges, "source", "target")
    assert sources.tolist() == [0, 1]
    assert targets.tolist() == [1, 2]
    assert weights is None


def test_fractional_node_ids_rejected(tmp_path):
    edges = write_edges(tmp_path / "edges.csv", "source,target\n0.5,1\n1,2\n")
    result = CliRunner().invoke(main, ["--input", edges])
    assert result.exit_code == 2
    assert "integers" in result.output
