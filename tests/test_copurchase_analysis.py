# tests/test_copurchase_analysis.py
import pandas as pd
import pytest

from config import CONFIG, REPORT_FILE_NAME, RESULTS_FILE_NAME, SUMMARY_FILE_NAME, TOP_NODES_FILE_NAME
from copurchase_analysis import main, parse_args


def test_parse_args_defaults():
    args = parse_args([])
    assert args.sample_size == CONFIG['sample_size']
    assert args.top_n == CONFIG['top_n']
    assert args.n_jobs is None
    assert not args.no_cache


def test_parse_args_rejects_negative_sample_size():
    with pytest.raises(SystemExit):
        parse_args(["--sample-size", "-3"])


def test_main_runs_full_pipeline(edge_list_file, tmp_path, capsys):
    output_dir = tmp_path / "results"
    status = main(["--edges", str(edge_list_file), "--output-dir", str(output_dir),
                   "--sample-size", "4", "--top-n", "2", "--seed", "1", "--n-jobs", "1",
                   "--no-cache"])
    assert status == 0

    for name in [RESULTS_FILE_NAME, TOP_NODES_FILE_NAME, SUMMARY_FILE_NAME, REPORT_FILE_NAME,
                 "closeness.png", "clustering.png"]:
        assert (output_dir / name).exists()

    results_df = pd.read_csv(output_dir / RESULTS_FILE_NAME)
    assert len(results_df) == 4
    assert results_df['normalized_closeness'].max() == 1.0

    # Node 30 (id 2) touches every other node: R = 4, D = 3
    top_df = pd.read_csv(output_dir / TOP_NODES_FILE_NAME)
    assert top_df.loc[0, 'node'] == 2
    assert str(top_df.loc[0, 'label']) == "30"
    assert "Top 2 Central Nodes" in capsys.readouterr().out


def test_main_reports_undefined_normalization(tmp_path, capsys):
    # Only a self-loop: the single sampled node reaches nothing else
    edges = tmp_path / "loop.txt"
    edges.write_text("7 7\n")
    status = main(["--edges", str(edges), "--output-dir", str(tmp_path / "out"),
                   "--sample-size", "1", "--n-jobs", "1", "--no-cache", "--no-plots"])
    assert status == 1
    assert "Cannot normalize" in capsys.readouterr().out


def test_main_missing_edge_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        main(["--edges", str(tmp_path / "missing.txt"), "--output-dir", str(tmp_path),
              "--no-cache", "--no-plots"])


def test_main_computes_metrics_through_compute_all_metrics(edge_list_file, tmp_path, monkeypatch):
    import copurchase_analysis

    calls = []
    real_compute_all_metrics = copurchase_analysis.compute_all_metrics

    def recording_compute_all_metrics(graph, sample_size, **kwargs):
        calls.append((sample_size, kwargs['seed']))
        return real_compute_all_metrics(graph, sample_size, **kwargs)

    monkeypatch.setattr(copurchase_analysis, "compute_all_metrics", recording_compute_all_metrics)
    status = main(["--edges", str(edge_list_file), "--output-dir", str(tmp_path / "out"),
                   "--sample-size", "3", "--seed", "5", "--n-jobs", "1", "--no-cache", "--no-plots"])
    assert status == 0
    assert calls == [(3, 5)]
