from tradedesk.schemas.dashboard import ModelConfig
from tradedesk.validation.validator import validate_model_config


def test_default_parameters_pass() -> None:
    result = validate_model_config(ModelConfig(type="GARCH", parameters={"p": 1, "q": 1, "o": 1, "m": 1}))
    assert result.status == "ok"
    assert result.issues == []


def test_missing_parameters_warn() -> None:
    result = validate_model_config(ModelConfig(type="ARIMA", parameters={"p": 2}))
    assert result.status == "warn"
    assert result.issues[0].message.endswith("d, q")


def test_unknown_parameter_fails() -> None:
    result = validate_model_config(ModelConfig(type="ARMA", parameters={"p": 1, "q": 1, "d": 1}))
    assert result.status == "fail"
    assert result.issues[0].field == "model.parameters"


def test_short_seasonal_period_warns() -> None:
    parameters = {"p": 1, "d": 1, "q": 1, "P": 1, "D": 1, "Q": 1, "s": 1}
    result = validate_model_config(ModelConfig(type="SARIMA", parameters=parameters))
    assert result.status == "warn"
    assert result.issues[0].field == "model.parameters.s"
