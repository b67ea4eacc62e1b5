"""Tests for hid_pointer.core.filter_factory."""

from __future__ import annotations

import json

import pytest

from hid_pointer.config.settings import Settings
from hid_pointer.core.filter_factory import (
    FilterType,
    create_filter,
    create_filter_from_settings,
    filter_from_dict,
    filter_to_dict,
    get_filter_type,
    get_parameter_info,
)
from hid_pointer.core.filters import (
    DoubleExponentialFilter,
    ExponentialMovingAverageFilter,
    IdentityFilter,
    KalmanFilter,
    MuteFilter,
    PointerMotionFilter,
    PredictiveFilter,
)

EXPECTED_CLASSES = {
    FilterType.IDENTITY: IdentityFilter,
    FilterType.MUTE: MuteFilter,
    FilterType.EXPONENTIAL_MA: ExponentialMovingAverageFilter,
    FilterType.DOUBLE_EXPONENTIAL: DoubleExponentialFilter,
    FilterType.KALMAN: KalmanFilter,
    FilterType.PREDICTIVE: PredictiveFilter,
}


class TestCreateFilter:
    @pytest.mark.parametrize("filter_type", list(FilterType))
    def test_builds_expected_class(self, filter_type: FilterType) -> None:
        assert type(create_filter(filter_type)) is EXPECTED_CLASSES[filter_type]

    def test_accepts_string_type(self) -> None:
        assert isinstance(create_filter("kalman"), KalmanFilter)

    def test_passes_parameters(self) -> None:
        smoothing = create_filter(FilterType.EXPONENTIAL_MA, alpha=0.2, min_change=0.5)
        assert smoothing.params() == {"alpha": 0.2, "min_change": 0.5}

    def test_out_of_range_parameters_clamped(self) -> None:
        smoothing = create_filter(FilterType.DOUBLE_EXPONENTIAL, alpha=5.0)
        assert smoothing.params()["alpha"] == 1.0

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown filter type"):
            create_filter("one_euro")

    def test_unknown_parameter_raises(self) -> None:
        with pytest.raises(ValueError, match="gamma"):
            create_filter(FilterType.KALMAN, gamma=1.0)

    def test_identity_rejects_parameters(self) -> None:
        with pytest.raises(ValueError):
            create_filter(FilterType.IDENTITY, alpha=0.5)

    def test_each_call_returns_fresh_instance(self) -> None:
        assert create_filter(FilterType.KALMAN) is not create_filter(FilterType.KALMAN)


class TestParameterInfo:
    @pytest.mark.parametrize("filter_type", list(FilterType))
    def test_defaults_match_constructor(self, filter_type: FilterType) -> None:
        defaults = create_filter(filter_type).params()
        infos = get_parameter_info(filter_type)
        assert {info.name: info.default for info in infos} == defaults

    @pytest.mark.parametrize("filter_type", list(FilterType))
    def test_ranges_are_ordered(self, filter_type: FilterType) -> None:
        for info in get_parameter_info(filter_type):
            assert info.minimum <= info.default <= info.maximum

    def test_stateless_filters_have_no_parameters(self) -> None:
        assert get_parameter_info(FilterType.IDENTITY) == ()
        assert get_parameter_info("mute") == ()

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(ValueError):
            get_parameter_info("bogus")


class TestSerialisation:
    def test_to_dict_format(self) -> None:
        data = filter_to_dict(KalmanFilter(process_noise=0.002, measurement_noise=0.3))
        assert data == {
            "type": "kalman",
            "params": {"process_noise": 0.002, "measurement_noise": 0.3},
        }

    @pytest.mark.parametrize(
        "smoothing",
        [
            IdentityFilter(),
            MuteFilter(),
            ExponentialMovingAverageFilter(alpha=0.25, min_change=0.01),
            DoubleExponentialFilter(alpha=0.4, beta=0.2),
            KalmanFilter(process_noise=0.005, measurement_noise=0.5),
            PredictiveFilter(prediction_time=0.1, smoothing_factor=0.7),
        ],
        ids=lambda f: type(f).__name__,
    )
    def test_restores_type_and_parameters(self, smoothing: PointerMotionFilter) -> None:
        restored = filter_from_dict(json.loads(json.dumps(filter_to_dict(smoothing))))
        assert type(restored) is type(smoothing)
        assert restored.params() == smoothing.params()

    def test_runtime_state_not_serialised(self) -> None:
        smoothing = ExponentialMovingAverageFilter(alpha=0.5, min_change=0.0)
        smoothing.filter((0.0, 0.0), 0.0)
        smoothing.filter((10.0, 0.0), 0.1)
        restored = filter_from_dict(filter_to_dict(smoothing))
        assert restored.filter((10.0, 0.0), 0.2) == (10.0, 0.0)

    def test_missing_params_uses_defaults(self) -> None:
        restored = filter_from_dict({"type": "predictive"})
        assert restored.params() == PredictiveFilter().params()

    def test_missing_type_raises(self) -> None:
        with pytest.raises(ValueError, match="type"):
            filter_from_dict({"params": {}})

    @pytest.mark.parametrize("filter_type", list(FilterType))
    def test_class_filter_type_matches_registry(self, filter_type: FilterType) -> None:
        cls = EXPECTED_CLASSES[filter_type]
        assert cls.filter_type == filter_type.value
        assert get_filter_type(cls()) is filter_type

    def test_get_filter_type_rejects_foreign_filter(self) -> None:
        class Custom(IdentityFilter):
            pass

        with pytest.raises(ValueError):
            get_filter_type(Custom())


class TestCreateFromSettings:
    def test_default_settings_give_identity(self) -> None:
        assert isinstance(create_filter_from_settings(Settings()), IdentityFilter)

    def test_uses_filter_params(self) -> None:
        settings = Settings(filter_type="double_exponential", filter_params={"beta": 0.3})
        smoothing = create_filter_from_settings(settings)
        assert smoothing.params() == {"alpha": 0.5, "beta": 0.3}
