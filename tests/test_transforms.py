"""Tests for log2, min-max and baseline-subtraction value transforms."""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from exprheatmap.core.errors import ConfigError, NumericDegeneracyWarning, SelectionError
from exprheatmap.heatmap.transforms import (
    BaselineSubtraction,
    Log2Transform,
    RowMinMaxScale,
    TransformConfig,
    ValueTransformer,
    transform_values,
)

from conftest import make_matrix


class TestTransformConfig:
    @pytest.mark.parametrize("apply_log2", [False, True])
    def test_baseline_without_scaling_is_config_error(self, apply_log2):
        config = TransformConfig(apply_log2=apply_log2, scale_genes=False, baseline_group=("s1",))
        with pytest.raises(ConfigError, match="scale_genes"):
            config.validate()
        with pytest.raises(ConfigError):
            ValueTransformer(config)

    def test_empty_baseline_is_none(self):
        config = TransformConfig(scale_genes=False, baseline_group=[])
        assert config.baseline_group is None
        config.validate()

    def test_baseline_list_becomes_tuple(self):
        config = TransformConfig(scale_genes=True, baseline_group=["s1", "s2"])
        assert config.baseline_group == ("s1", "s2")
        assert config.to_dict()["baseline_group"] == ["s1", "s2"]


class TestLog2:
    def test_zero_maps_to_zero(self, ab_matrix):
        result = Log2Transform()(ab_matrix)
        assert_allclose(result.data[0], [0.0, 1.0, 2.0])
        assert result.data[0, 0] == 0.0

    def test_non_negative_inputs_give_non_negative_outputs(self, synthetic_counts):
        result = Log2Transform()(synthetic_counts)
        assert (result.data >= 0).all()
        assert_array_equal(result.data == 0, synthetic_counts.data == 0)
        assert_allclose(result.data, np.log2(synthetic_counts.data + 1))

    def test_rejects_values_at_or_below_minus_pseudocount(self):
        matrix = make_matrix({"A": [-1.0, 2.0]}, ["s1", "s2"])
        with pytest.raises(ValueError, match="Log2Transform cannot be applied"):
            Log2Transform()(matrix)

    def test_input_untouched(self, ab_matrix):
        before = ab_matrix.data.copy()
        Log2Transform()(ab_matrix)
        assert_array_equal(ab_matrix.data, before)


class TestRowMinMaxScale:
    def test_rows_span_unit_interval(self, synthetic_counts):
        result = RowMinMaxScale()(synthetic_counts)

        for i in range(result.n_genes):
            row = synthetic_counts.data[i]
            if row.max() == row.min():
                continue
            out = result.data[i]
            assert out.min() >= 0.0 and out.max() <= 1.0
            assert out[np.argmin(row)] == 0.0
            assert out[np.argmax(row)] == 1.0

    def test_constant_row_falls_back_to_zero(self, ab_matrix):
        with pytest.warns(NumericDegeneracyWarning, match="B"):
            result, flagged = RowMinMaxScale().apply_flagged(ab_matrix)
        assert_array_equal(result.data[1], [0.0, 0.0, 0.0])
        assert not np.isnan(result.data).any()
        assert flagged == ["B"]
        assert_allclose(result.data[0], [0.0, 1 / 3, 1.0])

    def test_nan_ignored_for_range(self):
        matrix = make_matrix({"A": [np.nan, 2.0, 4.0]}, ["s1", "s2", "s3"])
        result = RowMinMaxScale()(matrix)
        assert np.isnan(result.data[0, 0])
        assert_allclose(result.data[0, 1:], [0.0, 1.0])

    def test_instance_reuse_keeps_no_state(self, ab_matrix, rorb_matrix):
        scale = RowMinMaxScale()
        with pytest.warns(NumericDegeneracyWarning):
            _, first = scale.apply_flagged(ab_matrix)
        with pytest.warns(NumericDegeneracyWarning):
            _, second = scale.apply_flagged(rorb_matrix)
        assert first == ["B"]
        assert second == ["Pde1a"]
        assert not hasattr(scale, "degenerate_genes")


class TestBaselineSubtraction:
    def test_baseline_mean_is_zero(self, rorb_matrix):
        group = ["HTp2_1", "HTp2_2"]
        result = BaselineSubtraction(group)(rorb_matrix)
        cols = [list(rorb_matrix.sample_ids).index(s) for s in group]
        assert_allclose(result.data[:, cols].mean(axis=1), 0.0, atol=1e-12)

    def test_subtracts_from_every_column(self, rorb_matrix):
        result = BaselineSubtraction(["HTp2_1", "HTp2_2"])(rorb_matrix)
        # Rorb: baseline mean 109
        assert_allclose(result.data[0], [11.0, -11.0, -106.0, -108.0])

    def test_unknown_baseline_sample(self, ab_matrix):
        with pytest.raises(SelectionError) as excinfo:
            BaselineSubtraction(["s9"])(ab_matrix)
        assert excinfo.value.missing_samples == ["s9"]

    def test_all_nan_baseline_falls_back_to_zero(self):
        matrix = make_matrix(
            {"A": [np.nan, np.nan, 4.0], "B": [1.0, 3.0, 5.0]},
            ["s1", "s2", "s3"],
        )
        with pytest.warns(NumericDegeneracyWarning, match="no baseline values") as record:
            result, flagged = BaselineSubtraction(["s1", "s2"]).apply_flagged(matrix)
        assert not [w for w in record if issubclass(w.category, RuntimeWarning)]
        assert flagged == ["A"]
        assert_array_equal(result.data[0], [0.0, 0.0, 0.0])
        assert_allclose(result.data[1], [-1.0, 1.0, 3.0])

    def test_partial_nan_baseline_uses_remaining_values(self):
        matrix = make_matrix({"A": [np.nan, 2.0, 6.0]}, ["s1", "s2", "s3"])
        result, flagged = BaselineSubtraction(["s1", "s2"]).apply_flagged(matrix)
        assert flagged == []
        assert_allclose(result.data[0, 1:], [0.0, 4.0])


class TestValueTransformer:
    def test_identity_is_a_copy(self, ab_matrix):
        result = transform_values(ab_matrix, TransformConfig())
        assert_array_equal(result.data, ab_matrix.data)
        result.data[0, 0] = 5.0
        assert ab_matrix.data[0, 0] == 0.0

    def test_log_only(self, ab_matrix):
        transformer = ValueTransformer(TransformConfig(apply_log2=True))
        assert [s.name for s in transformer.steps] == ["Log2Transform"]
        result = transformer.transform(ab_matrix)
        assert_allclose(result.data[1], [np.log2(3)] * 3)

    def test_mode_selection(self):
        minmax = ValueTransformer(TransformConfig(scale_genes=True))
        baseline = ValueTransformer(TransformConfig(scale_genes=True, baseline_group=("s1",)))
        assert isinstance(minmax.steps[-1], RowMinMaxScale)
        assert isinstance(baseline.steps[-1], BaselineSubtraction)

    def test_log_applied_before_scaling(self, ab_matrix):
        config = TransformConfig(apply_log2=True, scale_genes=True, baseline_group=("s1",))
        transformer = ValueTransformer(config)
        assert [s.name for s in transformer.steps] == ["Log2Transform", "BaselineSubtraction"]
        result = transformer.transform(ab_matrix)
        assert_allclose(result.data[0], [0.0, 1.0, 2.0])
        assert_allclose(result.data[1], [0.0, 0.0, 0.0], atol=1e-12)

    def test_degenerate_genes_returned(self, ab_matrix):
        transformer = ValueTransformer(TransformConfig(scale_genes=True))
        with pytest.warns(NumericDegeneracyWarning):
            _, flagged = transformer.transform_flagged(ab_matrix)
        assert flagged == ["B"]

    def test_baseline_degenerate_genes_returned(self):
        matrix = make_matrix({"A": [np.nan, 1.0], "B": [2.0, 4.0]}, ["s1", "s2"])
        transformer = ValueTransformer(
            TransformConfig(apply_log2=True, scale_genes=True, baseline_group=("s1",))
        )
        with pytest.warns(NumericDegeneracyWarning, match="A"):
            result, flagged = transformer.transform_flagged(matrix)
        assert flagged == ["A"]
        assert not np.isnan(result.data).any()

    def test_repr_lists_chain(self):
        transformer = ValueTransformer(TransformConfig(apply_log2=True, scale_genes=True))
        assert repr(transformer) == (
            "ValueTransformer(Log2Transform(pseudocount=1.0) -> RowMinMaxScale(fill_value=0.0))"
        )
        assert repr(ValueTransformer(TransformConfig())) == "ValueTransformer(Identity)"
