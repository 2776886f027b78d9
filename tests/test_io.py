"""Tests for expression-table loading and heatmap export."""

import json

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from exprheatmap.heatmap import TransformConfig, prepare_heatmap
from exprheatmap.io import load_expression_matrix, sniff_delimiter, write_heatmap_data, write_matrix_csv
from exprheatmap.utils.fileio import atomic_write, atomic_write_json, ensure_writable

from conftest import save_matrix_csv


class TestSniffDelimiter:
    @pytest.mark.parametrize("sep", [",", "\t", ";"])
    def test_detects_common_separators(self, tmp_path, rorb_matrix, sep):
        path = tmp_path / "table.txt"
        save_matrix_csv(rorb_matrix, path, sep=sep)
        assert sniff_delimiter(path) == sep

    def test_undetectable(self, tmp_path):
        path = tmp_path / "single.txt"
        path.write_text("value\n1\n2\n")
        with pytest.raises(ValueError, match="Could not detect delimiter"):
            sniff_delimiter(path)


class TestLoadExpressionMatrix:
    def test_csv(self, rorb_csv, rorb_matrix):
        matrix = load_expression_matrix(rorb_csv)
        assert list(matrix.gene_ids) == list(rorb_matrix.gene_ids)
        assert list(matrix.sample_ids) == list(rorb_matrix.sample_ids)
        assert_array_equal(matrix.data, rorb_matrix.data)

    def test_tsv(self, tmp_path, rorb_matrix):
        path = tmp_path / "counts.tsv"
        save_matrix_csv(rorb_matrix, path, sep="\t")
        matrix = load_expression_matrix(path)
        assert matrix.shape == rorb_matrix.shape
        assert_array_equal(matrix.data, rorb_matrix.data)

    def test_explicit_delimiter(self, tmp_path, rorb_matrix):
        path = tmp_path / "counts.txt"
        save_matrix_csv(rorb_matrix, path, sep="|")
        matrix = load_expression_matrix(path, delimiter="|")
        assert matrix.n_samples == 4

    def test_labels_are_strings(self, tmp_path):
        path = tmp_path / "numeric_ids.csv"
        path.write_text(",1,2\n100,1.0,2.0\n200,3.0,4.0\n")
        matrix = load_expression_matrix(path)
        assert list(matrix.gene_ids) == ["100", "200"]
        assert list(matrix.sample_ids) == ["1", "2"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_expression_matrix(tmp_path / "nope.csv")

    def test_directory(self, tmp_path):
        with pytest.raises(ValueError, match="not a file"):
            load_expression_matrix(tmp_path)

    def test_header_only(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text(",s1,s2\n")
        with pytest.raises(ValueError, match="no genes"):
            load_expression_matrix(path)

    def test_duplicate_genes_keep_first(self, tmp_path):
        path = tmp_path / "dups.csv"
        path.write_text(",s1,s2\nA,1,2\nB,3,4\nA,5,6\n")
        with pytest.warns(UserWarning, match="duplicate gene IDs"):
            matrix = load_expression_matrix(path)
        assert list(matrix.gene_ids) == ["A", "B"]
        assert_array_equal(matrix.data[0], [1.0, 2.0])

    def test_non_numeric_cells(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text(",s1,s2\nA,1,oops\nB,3,4\n")
        with pytest.raises(ValueError, match="non-numeric") as excinfo:
            load_expression_matrix(path)
        assert "oops" in str(excinfo.value)

    def test_infinite_values(self, tmp_path):
        path = tmp_path / "inf.csv"
        path.write_text(",s1,s2\nA,1,inf\nB,3,4\n")
        with pytest.raises(ValueError, match="infinite"):
            load_expression_matrix(path)

    def test_nan_warns(self, tmp_path):
        path = tmp_path / "nan.csv"
        path.write_text(",s1,s2\nA,1,\nB,3,4\n")
        with pytest.warns(UserWarning, match="NaN"):
            matrix = load_expression_matrix(path)
        assert np.isnan(matrix.data[0, 1])


class TestWriters:
    def test_matrix_csv_roundtrip(self, tmp_path, rorb_matrix):
        path = write_matrix_csv(rorb_matrix, tmp_path / "out" / "m.csv")
        df = pd.read_csv(path, index_col=0)
        assert df.index.name == "gene"
        assert_allclose(df.to_numpy(), rorb_matrix.data)

    def test_refuses_overwrite(self, tmp_path, ab_matrix):
        path = tmp_path / "m.csv"
        write_matrix_csv(ab_matrix, path)
        with pytest.raises(FileExistsError, match="Refusing to overwrite"):
            write_matrix_csv(ab_matrix, path)
        write_matrix_csv(ab_matrix, path, overwrite=True)

    def test_heatmap_export(self, tmp_path, ab_matrix):
        config = TransformConfig(apply_log2=True, scale_genes=True, baseline_group=("s1",))
        data = prepare_heatmap(ab_matrix, config=config)
        paths = write_heatmap_data(data, tmp_path / "ab")

        assert paths["selected"].name == "ab.selected.csv"
        assert paths["display"].name == "ab.display.csv"
        assert paths["domain"].name == "ab.domain.json"

        display = pd.read_csv(paths["display"], index_col=0)
        assert list(display.index) == ["B", "A"]

        meta = json.loads(paths["domain"].read_text())
        assert meta["domain"]["min"] == 0.0
        assert meta["domain"]["max"] == pytest.approx(2.1)
        assert meta["config"]["baseline_group"] == ["s1"]
        assert meta["transforms"][-1] == "RowFlip()"

    def test_export_checks_every_path_first(self, tmp_path, ab_matrix):
        data = prepare_heatmap(ab_matrix)
        (tmp_path / "ab.domain.json").write_text("{}")
        with pytest.raises(FileExistsError):
            write_heatmap_data(data, tmp_path / "ab")
        assert not (tmp_path / "ab.selected.csv").exists()


class TestFileio:
    def test_ensure_writable_creates_parent(self, tmp_path):
        path = ensure_writable(tmp_path / "a" / "b" / "c.png")
        assert path.parent.is_dir()
        assert not path.exists()

    def test_atomic_write_json(self, tmp_path):
        path = tmp_path / "x.json"
        atomic_write_json(path, {"a": [1, 2]})
        assert json.loads(path.read_text()) == {"a": [1, 2]}
        assert list(tmp_path.glob("*.tmp")) == []

    def test_atomic_write_json_numpy_values(self, tmp_path):
        path = tmp_path / "domain.json"
        atomic_write_json(path, {"min": np.float64(0.5), "genes": np.array(["A", "B"])})
        assert json.loads(path.read_text()) == {"min": 0.5, "genes": ["A", "B"]}
        assert path.read_text().endswith("\n")

    def test_failed_write_keeps_existing_file(self, tmp_path):
        path = tmp_path / "m.csv"
        path.write_text("old\n")

        def explode(handle):
            handle.write("partial")
            raise RuntimeError("disk full")

        with pytest.raises(RuntimeError, match="disk full"):
            atomic_write(path, explode)
        assert path.read_text() == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["m.csv"]
